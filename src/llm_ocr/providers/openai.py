"""OpenAI GPT-4o vision provider."""

import json
import logging
from typing import Any, Optional

from openai import AsyncOpenAI

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

DEFAULT_MAX_TOKENS = 4096


def _image_block(image: Any) -> dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {
            "url": f"data:image/png;base64,{encode_image_to_base64(image)}",
            "detail": "high",
        },
    }


def _usage(response: Any) -> tuple[int, int]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0, 0
    return (
        getattr(usage, "prompt_tokens", None) or 0,
        getattr(usage, "completion_tokens", None) or 0,
    )


class OpenAIModel(ModelInterface):
    def __init__(
        self,
        api_key: str,
        mode: OperationMode,
        model: str,
        llm_params: Optional[dict[str, Any]] = None,
    ) -> None:
        self.client = AsyncOpenAI(api_key=api_key)
        self.mode = mode
        self.model = model
        self.llm_params = llm_params

    async def aclose(self) -> None:
        await self.client.close()

    async def _create(self, **kwargs: Any) -> Any:
        params = {"max_tokens": DEFAULT_MAX_TOKENS, **convert_keys_to_snake_case(self.llm_params)}
        try:
            return await self.client.chat.completions.create(model=self.model, **params, **kwargs)
        except Exception:
            logger.exception("Error in OpenAI completion")
            raise

    async def _handle_ocr(self, request: CompletionArgs) -> CompletionResponse:
        messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT_BASE}]
        if request.maintain_format and request.prior_page:
            messages.append({"role": "system", "content": consistency_prompt(request.prior_page)})
        messages.append({"role": "user", "content": [_image_block(request.image)]})

        response = await self._create(messages=messages)

        input_tokens, output_tokens = _usage(response)
        return CompletionResponse(
            content=response.choices[0].message.content or "",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def _handle_extraction(self, request: ExtractionArgs) -> ExtractionResponse:
        response = await self._create(
            messages=[{
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    _image_block(request.image),
                ],
            }],
            response_format={
                "type": "json_schema",
                "json_schema": {"name": "extraction", "schema": request.schema},
            },
        )

        text = response.choices[0].message.content
        try:
            extracted = json.loads(text)
        except (TypeError, ValueError) as err:
            logger.error("OpenAI extraction returned unparseable output: %r", text)
            raise MalformedResponseError(
                "Extraction response is not valid JSON", text=text
            ) from err

        input_tokens, output_tokens = _usage(response)
        return ExtractionResponse(
            extracted=extracted,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
