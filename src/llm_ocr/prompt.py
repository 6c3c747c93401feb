"""Prompts shared by all providers."""

SYSTEM_PROMPT_BASE = """\
Convert the following document to markdown.
Return only the markdown with no explanation text. \
Do not include delimiters like ```markdown or ```html.

RULES:
  - You must include all information on the page. Do not exclude headers, \
footers, charts, infographics, or subtext.
  - Return tables in an HTML format.
  - Logos should be wrapped in brackets. Ex: <logo>Coca-Cola<logo>
  - Watermarks should be wrapped in brackets. Ex: <watermark>OFFICIAL COPY<watermark>
  - Page numbers should be wrapped in brackets. \
Ex: <page_number>14<page_number> or <page_number>9/22<page_number>
  - Prefer using ☐ and ☑ for check boxes.
"""

EXTRACTION_PROMPT = "Extract schema data from the following image"


def consistency_prompt(prior_page: str) -> str:
    """Ask the model to keep the formatting of the previously converted page."""
    return (
        "Markdown must maintain consistent formatting with the following page: "
        f'\n\n"""{prior_page}"""'
    )
