"""Request and response shapes shared by every provider adapter."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

ImageSource = Union[bytes, str, Path]


class OperationMode(str, Enum):
    OCR = "ocr"
    EXTRACTION = "extraction"


@dataclass(frozen=True)
class CompletionArgs:
    image: ImageSource
    maintain_format: bool = False
    prior_page: Optional[str] = None


@dataclass(frozen=True)
class ExtractionArgs:
    image: ImageSource
    schema: dict[str, Any]


@dataclass
class CompletionResponse:
    content: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class ExtractionResponse:
    extracted: Any
    input_tokens: int = 0
    output_tokens: int = 0
