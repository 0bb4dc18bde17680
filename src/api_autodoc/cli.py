"""CLI entry point for api-autodoc."""

import asyncio
import json
import logging
from pathlib import Path

import click
import yaml

from api_autodoc.config import Settings
from api_autodoc.openapi.generate import aggregate_documents, generate_openapi_doc
from api_autodoc.openapi.validator import validate_document
from api_autodoc.storage import EndpointStore


def _load_document(file_path: Path) -> dict:
    """Load a JSON or YAML file."""
    return yaml.safe_load(file_path.read_text(encoding="utf-8"))


def _dump_document(doc: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def _detect_format(output: Path, fmt: str) -> str:
    if fmt != "auto":
        return fmt
    return "yaml" if output.suffix in (".yaml", ".yml") else "json"


async def _export(settings: Settings) -> dict:
    store = EndpointStore(settings.database_url)
    try:
        await store.create_all()
        records = await store.list_all_ordered_by_recency()
    finally:
        await store.dispose()
    return aggregate_documents(records, settings.doc_info)


async def _init_db(database_url: str) -> None:
    store = EndpointStore(database_url)
    try:
        await store.create_all()
    finally:
        await store.dispose()


@click.group()
@click.pass_context
def main(ctx: click.Context):
    """API Autodoc: document APIs by proxying their traffic."""
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind.")
@click.option("--port", default=8000, type=int, help="Port to listen on.")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the autodoc proxy and Swagger UI."""
    import uvicorn

    uvicorn.run("api_autodoc.app:create_app", factory=True, host=host, port=port, reload=reload)


@main.command("init-db")
@click.option("--database-url", default=None, help="Database URL (defaults to DATABASE_URL).")
@click.pass_obj
def init_db(settings: Settings, database_url: str | None):
    """Create the endpoints table."""
    database_url = database_url or settings.database_url
    asyncio.run(_init_db(database_url))
    click.echo(f"Initialized {database_url}")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the OpenAPI document.")
@click.option("--database-url", default=None, help="Database URL (defaults to DATABASE_URL).")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.pass_obj
def export(settings: Settings, output: Path, database_url: str | None, fmt: str):
    """Export every documented endpoint as one OpenAPI document."""
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})

    doc = asyncio.run(_export(settings))
    click.echo(f"Found {len(doc['paths'])} documented paths.")

    errors = validate_document(doc)
    if errors:
        click.echo(f"Validation found {len(errors)} problems:")
        for location, err in errors.items():
            click.echo(f"  {location}: {err}")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump_document(doc, _detect_format(output, fmt)), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}")


@main.command()
@click.argument("details_path", type=click.Path(exists=True, path_type=Path))
@click.option("--path", "api_path", required=True, help="API path, e.g. /api/v1/users.")
@click.option("--method", default="get", type=click.Choice(["get", "post", "put", "patch", "delete"], case_sensitive=False), help="HTTP method.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file (prints to stdout when omitted).")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
def render(details_path: Path, api_path: str, method: str, output: Path | None, fmt: str):
    """Render the OpenAPI document for a single endpoint details file."""
    details = _load_document(details_path)
    doc = generate_openapi_doc(api_path, method, details)

    if output is None:
        click.echo(_dump_document(doc, "json" if fmt == "auto" else fmt), nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump_document(doc, _detect_format(output, fmt)), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}")
