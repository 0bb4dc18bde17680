"""OpenAPI agent: asks the LLM to describe an observed endpoint call."""

import json
import logging
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from api_autodoc.errors import GenerationError
from api_autodoc.llm import LlmClient
from api_autodoc.models import DocumentationData, EndpointDetails

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"


def trim_response(response: Any) -> Any:
    """Keep only the first element of a list-valued ``data`` field.

    Paginated responses would otherwise blow up the prompt.
    """
    if isinstance(response, dict) and isinstance(response.get("data"), list):
        return {**response, "data": response["data"][:1]}
    return response


class OpenApiAgent:
    """Generates endpoint details from captured traffic."""

    def __init__(self, model: str | None = None):
        self.client = LlmClient(model=model)

    async def summarize(
        self, observation: DocumentationData, previous: dict | None = None
    ) -> EndpointDetails:
        """Describe ``observation``, updating ``previous`` when one is stored.

        Raises ``GenerationError`` if the call fails or the output is not
        valid endpoint details.
        """
        system_prompt = (PROMPTS_DIR / "autodoc.md").read_text(encoding="utf-8")
        user_prompt = self._build_prompt(observation, previous)

        try:
            response = await self.client.call(system=system_prompt, user=user_prompt)
            data = json.loads(_extract_json(response))
            return EndpointDetails.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.exception("Model output for %s %s is not valid", observation.method, observation.path)
            raise GenerationError(f"Invalid model output: {e}") from e
        except Exception as e:
            logger.exception("Model call failed for %s %s", observation.method, observation.path)
            raise GenerationError(str(e)) from e

    def _build_prompt(self, observation: DocumentationData, previous: dict | None) -> str:
        sections = [
            f"Generate endpoint documentation for: {observation.method} {observation.path}",
            f"Params: {json.dumps(observation.params)}",
            f"Body: {json.dumps(observation.body) if observation.body is not None else 'None'}",
            f"Example Response ({observation.status}): "
            f"{json.dumps(trim_response(observation.response), indent=2)}",
            f"Response Headers: {json.dumps(observation.headers)}",
        ]
        if previous:
            sections.append(f"Current Spec: {json.dumps(previous)}")
        return "\n\n".join(sections)


def _extract_json(text: str) -> str:
    """Extract JSON from a response that might contain Markdown code blocks."""
    match = re.search(r"```(?:json)?\s*\n(.*?)```", text, re.DOTALL)
    if match:
        return match.group(1).strip()
    return text.strip()
