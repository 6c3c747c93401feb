"""Abstract base for LLM OCR providers."""

from abc import ABC, abstractmethod
from typing import Union

from llm_ocr.errors import UnsupportedModeError
from llm_ocr.types import (
    CompletionArgs,
    CompletionResponse,
    ExtractionArgs,
    ExtractionResponse,
    OperationMode,
)


def require_request(request: object, expected: type) -> None:
    if not isinstance(request, expected):
        raise TypeError(
            f"Expected {expected.__name__} for this adapter's mode, "
            f"got {type(request).__name__}"
        )


class ModelInterface(ABC):
    """One vendor behind the shared two-mode contract.

    Subclasses set ``self.mode`` at construction and implement the two
    handlers; dispatch between them is fixed here.
    """

    mode: OperationMode

    async def get_completion(
        self, request: Union[CompletionArgs, ExtractionArgs]
    ) -> Union[CompletionResponse, ExtractionResponse]:
        """Run one page through the model in the mode the adapter was built with.

        OCR adapters take a CompletionArgs and return a CompletionResponse;
        extraction adapters take an ExtractionArgs and return an
        ExtractionResponse.
        """
        match self.mode:
            case OperationMode.OCR:
                require_request(request, CompletionArgs)
                return await self._handle_ocr(request)
            case OperationMode.EXTRACTION:
                require_request(request, ExtractionArgs)
                return await self._handle_extraction(request)
            case _:
                raise UnsupportedModeError(self.mode)

    async def aclose(self) -> None:
        """Release the vendor client.  Adapters without one have nothing to do."""

    @abstractmethod
    async def _handle_ocr(self, request: CompletionArgs) -> CompletionResponse:
        ...

    @abstractmethod
    async def _handle_extraction(self, request: ExtractionArgs) -> ExtractionResponse:
        ...
