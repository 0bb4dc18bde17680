"""
Configuration module using Pydantic Settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from api_autodoc.llm import DEFAULT_MODEL


class Settings(BaseSettings):
    """Service settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Base URL the catch-all autodoc route forwards to
    real_api_endpoint: str | None = Field(default=None, alias="REAL_API_ENDPOINT")
    database_url: str = Field(default="sqlite+aiosqlite:///./autodoc.db", alias="DATABASE_URL")

    model: str = Field(default=DEFAULT_MODEL, alias="AUTODOC_MODEL")
    doc_title: str = Field(default="My API", alias="AUTODOC_DOC_TITLE")
    doc_version: str = Field(default="1.0.0", alias="AUTODOC_DOC_VERSION")
    upstream_timeout: float = Field(default=30.0, alias="AUTODOC_UPSTREAM_TIMEOUT")
    log_level: str = Field(default="INFO", alias="AUTODOC_LOG_LEVEL")

    @property
    def doc_info(self) -> dict[str, str]:
        return {"title": self.doc_title, "version": self.doc_version}
