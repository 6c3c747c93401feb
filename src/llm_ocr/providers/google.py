"""Google Gemini vision provider (google-genai SDK)."""

import json
import logging
from typing import Any, Optional, Protocol

from google import genai
from google.genai import types as genai_types

from llm_ocr.errors import MalformedResponseError
from llm_ocr.prompt import EXTRACTION_PROMPT, SYSTEM_PROMPT_BASE, consistency_prompt
from llm_ocr.providers.base import ModelInterface
from llm_ocr.types import (
    CompletionArgs,
    CompletionResponse,
    ExtractionArgs,
    ExtractionResponse,
    OperationMode,
)
from llm_ocr.utils import convert_keys_to_snake_case, load_image_bytes

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/png"


class ContentGenerator(Protocol):
    """The one SDK operation the adapter needs.

    ``genai.Client(...).aio.models`` satisfies it; tests pass a stand-in.
    """

    async def generate_content(self, *, model: str, contents: Any, config: Any) -> Any:
        ...


def _usage(response: Any) -> tuple[int, int]:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return 0, 0
    return (
        getattr(usage, "prompt_token_count", None) or 0,
        getattr(usage, "candidates_token_count", None) or 0,
    )


def _image_part(image: Any) -> genai_types.Part:
    return genai_types.Part.from_bytes(data=load_image_bytes(image), mime_type=IMAGE_MIME_TYPE)


class GoogleModel(ModelInterface):
    def __init__(
        self,
        api_key: str,
        mode: OperationMode,
        model: str,
        llm_params: Optional[dict[str, Any]] = None,
        client: Optional[ContentGenerator] = None,
    ) -> None:
        self.client = client if client is not None else genai.Client(api_key=api_key).aio.models
        self.mode = mode
        self.model = model
        self.llm_params = llm_params

    def build_ocr_parts(self, request: CompletionArgs) -> list[genai_types.Part]:
        parts = [genai_types.Part.from_text(text=SYSTEM_PROMPT_BASE)]

        if request.maintain_format and request.prior_page:
            parts.append(genai_types.Part.from_text(text=consistency_prompt(request.prior_page)))

        parts.append(_image_part(request.image))
        return parts

    def build_extraction_config(self, schema: dict[str, Any]) -> dict[str, Any]:
        return {
            **convert_keys_to_snake_case(self.llm_params),
            "response_mime_type": "application/json",
            "response_schema": schema,
        }

    async def _generate(self, parts: list[genai_types.Part], config: dict[str, Any]) -> Any:
        logger.debug("Sending %d part(s) to %s (mode=%s)", len(parts), self.model, self.mode)
        try:
            return await self.client.generate_content(
                model=self.model,
                contents=[genai_types.Content(role="user", parts=parts)],
                config=config,
            )
        except Exception:
            logger.exception("Error in Google completion")
            raise

    async def _handle_ocr(self, request: CompletionArgs) -> CompletionResponse:
        response = await self._generate(
            self.build_ocr_parts(request), convert_keys_to_snake_case(self.llm_params)
        )
        input_tokens, output_tokens = _usage(response)
        return CompletionResponse(
            content=response.text or "",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def _handle_extraction(self, request: ExtractionArgs) -> ExtractionResponse:
        parts = [genai_types.Part.from_text(text=EXTRACTION_PROMPT), _image_part(request.image)]
        response = await self._generate(parts, self.build_extraction_config(request.schema))

        text = response.text
        try:
            extracted = json.loads(text)
        except (TypeError, ValueError) as err:
            logger.error("Google extraction returned unparseable output: %r", text)
            raise MalformedResponseError(
                "Extraction response is not valid JSON", text=text
            ) from err

        input_tokens, output_tokens = _usage(response)
        return ExtractionResponse(
            extracted=extracted,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
