"""Anthropic Claude vision provider.

Structured extraction is done by forcing a single tool call whose input
schema is the caller's schema; the tool input is the extracted value.
"""

import logging
from typing import Any, Optional

import anthropic

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
from llm_ocr.utils import convert_keys_to_snake_case, encode_image_to_base64

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192
EXTRACTION_TOOL = "record_extraction"


def _image_block(image: Any) -> dict[str, Any]:
    return {
        "type": "image",
        "source": {
            "type": "base64",
            "media_type": "image/png",
            "data": encode_image_to_base64(image),
        },
    }


class AnthropicModel(ModelInterface):
    def __init__(
        self,
        api_key: str,
        mode: OperationMode,
        model: str,
        llm_params: Optional[dict[str, Any]] = None,
    ) -> None:
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.mode = mode
        self.model = model
        self.llm_params = llm_params

    async def aclose(self) -> None:
        await self.client.close()

    def _params(self) -> dict[str, Any]:
        return {"max_tokens": DEFAULT_MAX_TOKENS, **convert_keys_to_snake_case(self.llm_params)}

    async def _create(self, **kwargs: Any) -> Any:
        try:
            return await self.client.messages.create(model=self.model, **self._params(), **kwargs)
        except Exception:
            logger.exception("Error in Anthropic completion")
            raise

    async def _handle_ocr(self, request: CompletionArgs) -> CompletionResponse:
        system = SYSTEM_PROMPT_BASE
        if request.maintain_format and request.prior_page:
            system = f"{system}\n\n{consistency_prompt(request.prior_page)}"

        response = await self._create(
            system=system,
            messages=[{"role": "user", "content": [_image_block(request.image)]}],
        )

        text = "".join(block.text for block in response.content if block.type == "text")
        return CompletionResponse(
            content=text,
            input_tokens=getattr(response.usage, "input_tokens", None) or 0,
            output_tokens=getattr(response.usage, "output_tokens", None) or 0,
        )

    async def _handle_extraction(self, request: ExtractionArgs) -> ExtractionResponse:
        response = await self._create(
            tools=[{
                "name": EXTRACTION_TOOL,
                "description": "Record the data extracted from the image.",
                "input_schema": request.schema,
            }],
            tool_choice={"type": "tool", "name": EXTRACTION_TOOL},
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    _image_block(request.image),
                ],
            }],
        )

        tool_use = next((block for block in response.content if block.type == "tool_use"), None)
        if tool_use is None:
            logger.error("Anthropic extraction returned no %s tool call", EXTRACTION_TOOL)
            raise MalformedResponseError("Extraction response has no tool call")

        return ExtractionResponse(
            extracted=tool_use.input,
            input_tokens=getattr(response.usage, "input_tokens", None) or 0,
            output_tokens=getattr(response.usage, "output_tokens", None) or 0,
        )
