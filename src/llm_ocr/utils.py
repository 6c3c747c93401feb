"""Small pure helpers shared by the provider adapters."""

import base64
import re
from pathlib import Path
from typing import Any, Optional

from llm_ocr.types import ImageSource

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def camel_to_snake(name: str) -> str:
    """``maxOutputTokens`` -> ``max_output_tokens``.  snake_case passes through."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def _rename_keys(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            camel_to_snake(key) if isinstance(key, str) else key: _rename_keys(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_rename_keys(item) for item in data]
    return data


def convert_keys_to_snake_case(data: Optional[Any]) -> Any:
    """Recursively rename every dict key from camelCase to snake_case.

    Lists are walked element by element; any other value, ``None`` included,
    is returned as-is.  Only a top-level ``None`` becomes an empty dict, so
    the result can be splatted into a generation config directly.
    """
    if data is None:
        return {}
    return _rename_keys(data)


def load_image_bytes(image: ImageSource) -> bytes:
    if isinstance(image, bytes):
        return image
    return Path(image).read_bytes()


def encode_image_to_base64(image: ImageSource) -> str:
    return base64.standard_b64encode(load_image_bytes(image)).decode("utf-8")
