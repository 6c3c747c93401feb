"""Errors raised by the adapters themselves.

Failures from a vendor SDK call (network, auth, quota) are not wrapped: the
SDK's own exception reaches the caller unchanged.
"""

from typing import Any, Optional


class OcrError(Exception):
    """Base class for errors raised by llm_ocr."""


class UnsupportedModeError(OcrError):
    def __init__(self, mode: Any) -> None:
        super().__init__(f"Unsupported operation mode: {mode!r}")
        self.mode = mode


class MalformedResponseError(OcrError):
    """The model's extraction output could not be parsed as structured data."""

    def __init__(self, message: str, text: Optional[str] = None) -> None:
        super().__init__(message)
        self.text = text
