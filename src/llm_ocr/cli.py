"""Main CLI entry point."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from llm_ocr.config import Config, Provider
from llm_ocr.pdf import parse_page_selection, pdf_to_images
from llm_ocr.postprocessing import format_markdown
from llm_ocr.preprocessing import prepare_page
from llm_ocr.providers.anthropic import AnthropicModel
from llm_ocr.providers.base import ModelInterface
from llm_ocr.providers.google import GoogleModel
from llm_ocr.providers.openai import OpenAIModel
from llm_ocr.types import CompletionArgs, ExtractionArgs, OperationMode

console = Console(stderr=True)
load_dotenv()

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tiff"}


@click.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--provider", "-p",
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    default=Provider.GOOGLE.value,
    show_default=True,
    help="LLM provider to use.",
)
@click.option(
    "--model", "-m",
    default=None,
    help="Model name override (defaults to the provider's vision model).",
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file path. Defaults to stdout.",
)
@click.option(
    "--dpi",
    default=150,
    show_default=True,
    help="DPI for PDF rendering. Higher = better quality, larger API payloads.",
)
@click.option(
    "--pages",
    default=None,
    help="PDF pages to process, e.g. '1,3-5'. Defaults to every page.",
)
@click.option(
    "--api-key",
    default=None,
    help="API key (overrides environment variable).",
)
@click.option(
    "--maintain-format/--no-maintain-format",
    default=False,
    show_default=True,
    help="Process pages in order, passing each page's markdown to the next for consistent formatting.",
)
@click.option(
    "--schema",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON schema file. Switches from OCR to structured extraction.",
)
@click.option("--temperature", type=float, default=None, help="Sampling temperature.")
@click.option("--max-tokens", type=int, default=None, help="Output token limit per page.")
@click.option(
    "--trim-edges/--no-trim-edges",
    default=True,
    show_default=True,
    help="Crop uniform borders from each page before upload.",
)
@click.option(
    "--max-image-size",
    default=2048,
    show_default=True,
    help="Downscale pages so the long edge is at most this many pixels.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="llm-ocr")
def main(
    input_path, provider, model, output, dpi, pages, api_key, maintain_format,
    schema, temperature, max_tokens, trim_edges, max_image_size, verbose,
):
    """OCR or extract structured data from an image or PDF using LLM vision APIs.

    INPUT_PATH can be a .pdf or an image file (.png, .jpg, .jpeg, .webp,
    .gif, .bmp, .tiff). Results are written to stdout unless --output is
    specified.
    """
    _configure_logging(verbose)

    try:
        config = Config.from_env(
            provider=Provider(provider),
            model_override=model,
            api_key_override=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    suffix = input_path.suffix.lower()

    try:
        if suffix == ".pdf":
            selected = parse_page_selection(pages) if pages else None
            with console.status("[cyan]Converting PDF to images..."):
                raw_pages = pdf_to_images(input_path, dpi=dpi, pages=selected)
            page_numbers = selected or list(range(1, len(raw_pages) + 1))
            console.print(f"[dim]{len(raw_pages)} page(s) extracted[/dim]")
        elif suffix in IMAGE_EXTENSIONS:
            raw_pages = [input_path.read_bytes()]
            page_numbers = [1]
        else:
            console.print(f"[red]Unsupported file type:[/red] {suffix}")
            sys.exit(1)

        images = [prepare_page(raw, trim=trim_edges, max_size=max_image_size) for raw in raw_pages]
        json_schema = json.loads(schema.read_text(encoding="utf-8")) if schema else None
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    mode = OperationMode.EXTRACTION if json_schema is not None else OperationMode.OCR

    try:
        with console.status(f"[cyan]Running {mode.value} via {provider} ({config.model})..."):
            result, usage = asyncio.run(
                _run(config, mode, images, page_numbers, json_schema, maintain_format)
            )
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[dim]Tokens: {usage[0]} input, {usage[1]} output[/dim]")

    if output:
        output.write_text(result, encoding="utf-8")
        console.print(f"[green]Written to {output}[/green]")
    else:
        click.echo(result)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _build_provider(config: Config, mode: OperationMode) -> ModelInterface:
    if config.provider == Provider.GOOGLE:
        model_cls = GoogleModel
    elif config.provider == Provider.ANTHROPIC:
        model_cls = AnthropicModel
    elif config.provider == Provider.OPENAI:
        model_cls = OpenAIModel
    else:
        raise ValueError(f"Unknown provider: {config.provider}")
    return model_cls(
        api_key=config.api_key,
        mode=mode,
        model=config.model,
        llm_params=config.llm_params or None,
    )


def _total_usage(responses: Sequence[Any]) -> tuple[int, int]:
    return (
        sum(r.input_tokens for r in responses),
        sum(r.output_tokens for r in responses),
    )


async def _run(
    config: Config,
    mode: OperationMode,
    images: list[bytes],
    page_numbers: list[int],
    schema: Optional[dict[str, Any]],
    maintain_format: bool,
) -> tuple[str, tuple[int, int]]:
    # The vendor client is bound to this event loop, so it is built and
    # closed inside it.
    adapter = _build_provider(config, mode)
    try:
        if mode is OperationMode.EXTRACTION:
            return await _run_extraction(adapter, images, page_numbers, schema)
        return await _run_ocr(adapter, images, maintain_format)
    finally:
        await adapter.aclose()


async def _run_ocr(
    adapter: ModelInterface, images: list[bytes], maintain_format: bool
) -> tuple[str, tuple[int, int]]:
    if maintain_format:
        # Each page needs the previous page's output, so pages go one by one.
        responses = []
        prior_page: Optional[str] = None
        for image in images:
            response = await adapter.get_completion(
                CompletionArgs(image=image, maintain_format=True, prior_page=prior_page)
            )
            prior_page = format_markdown(response.content)
            responses.append(response)
    else:
        responses = await asyncio.gather(
            *(adapter.get_completion(CompletionArgs(image=image)) for image in images)
        )

    markdown = "\n\n".join(format_markdown(r.content) for r in responses)
    return markdown, _total_usage(responses)


async def _run_extraction(
    adapter: ModelInterface,
    images: list[bytes],
    page_numbers: list[int],
    schema: dict[str, Any],
) -> tuple[str, tuple[int, int]]:
    responses = await asyncio.gather(
        *(adapter.get_completion(ExtractionArgs(image=image, schema=schema)) for image in images)
    )
    payload = [
        {"page": n, "extracted": r.extracted} for n, r in zip(page_numbers, responses)
    ]
    return json.dumps(payload, indent=2, ensure_ascii=False), _total_usage(responses)
