"""PDF to image conversion using PyMuPDF."""

from pathlib import Path
from typing import Iterable, Optional

import fitz  # PyMuPDF


def parse_page_selection(selection: str) -> list[int]:
    """Turn ``"1,3-5"`` into ``[1, 3, 4, 5]`` (1-based, sorted, de-duplicated)."""
    pages: set[int] = set()
    for chunk in selection.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        start, sep, end = chunk.partition("-")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError:
            raise ValueError(f"Invalid page selection: {chunk!r}") from None
        if first < 1 or last < first:
            raise ValueError(f"Invalid page range: {chunk!r}")
        pages.update(range(first, last + 1))
    if not pages:
        raise ValueError("Page selection is empty")
    return sorted(pages)


def pdf_to_images(
    pdf_path: Path,
    dpi: int = 150,
    pages: Optional[Iterable[int]] = None,
) -> list[bytes]:
    """Render PDF pages to PNG byte strings, in page order.

    Args:
        pdf_path: Path to the PDF file.
        dpi:      Render resolution.  Higher = better quality, larger payload.
        pages:    1-based page numbers to render.  All pages when omitted.
    """
    matrix = fitz.Matrix(dpi / 72, dpi / 72)  # 72 is the base DPI in the PDF spec

    with fitz.open(str(pdf_path)) as doc:
        if pages is None:
            selected = list(range(1, doc.page_count + 1))
        else:
            selected = sorted(set(pages))
            out_of_range = [n for n in selected if not 1 <= n <= doc.page_count]
            if out_of_range:
                raise ValueError(
                    f"Page(s) {out_of_range} out of range; document has {doc.page_count} page(s)"
                )

        return [
            doc[n - 1].get_pixmap(matrix=matrix, colorspace=fitz.csRGB).tobytes("png")
            for n in selected
        ]
