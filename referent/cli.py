"""CLI entry point for referent."""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from .config import get_settings
from .errors import ReferentError
from .extract import ParsedArticle
from .images import GeneratedImage, generate_image
from .process import (
    ActionKind,
    CompletionClient,
    CompletionResult,
    DispatchOptions,
    count_tokens,
    run_action,
    split_text,
)
from .session import Session
from .sources import parse_url

app = typer.Typer(
    name="referent",
    help="Parse web articles and process them with AI.",
    no_args_is_help=True,
)

console = Console()

SHELL_HELP = (
    "Commands: <url> to parse an article, "
    + ", ".join(kind.value for kind in ActionKind)
    + ", image, clear, quit"
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output"),
    ] = False,
) -> None:
    """Parse web articles and process them with AI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _spinner() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def _print_error(error: ReferentError) -> None:
    title = f"[red]Error ({error.category})[/red]"
    console.print(Panel(error.message, title=title, border_style="red"))


def _print_article(article: ParsedArticle, url: str) -> None:
    console.print(f"[bold]{article.title}[/bold]")
    console.print(f"[dim]{url}[/dim]")
    if article.published_at:
        console.print(f"[dim]Published: {article.published_at}[/dim]")
    console.print(f"[green]✓[/green] Content: {len(article.body)} chars")


def _print_result(action: ActionKind, result: CompletionResult) -> None:
    subtitle = f"{result.model} · {result.usage.total_tokens} tokens"
    if result.chunks > 1:
        subtitle += f" · {result.chunks} chunks"
    console.print(Panel(result.text, title=action.value, subtitle=subtitle))


def _image_path(out: Path | None, image: GeneratedImage) -> Path:
    if out is not None:
        return out
    extension = mimetypes.guess_extension(image.content_type) or ".png"
    return Path(f"illustration{extension}")


def _save_image(out: Path | None, image: GeneratedImage) -> Path:
    path = _image_path(out, image)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(image.data)
    return path


@app.command()
def parse(
    url: Annotated[str, typer.Argument(help="Article URL")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the extracted article as JSON"),
    ] = False,
) -> None:
    """Extract title, date and text of an article."""
    settings = get_settings()
    try:
        with _spinner() as progress:
            progress.add_task("Parsing article...", total=None)
            article = parse_url(url, timeout=settings.fetch_timeout)
    except ReferentError as e:
        _print_error(e)
        raise typer.Exit(1) from e

    if as_json:
        console.print_json(json.dumps(article.to_dict(), ensure_ascii=False))
        return

    _print_article(article, url)
    console.print()
    console.print(article.body)


@app.command()
def run(
    url: Annotated[str, typer.Argument(help="Article URL")],
    action: Annotated[
        ActionKind,
        typer.Option("--action", "-a", help="What to produce from the article"),
    ] = ActionKind.SUMMARY,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write the result to this file"),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Output language"),
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Characters per chunk for long articles"),
    ] = None,
) -> None:
    """Parse an article and run one AI action on it."""
    settings = get_settings()
    options = DispatchOptions(
        language=language or settings.target_language,
        chunk_threshold=chunk_size or settings.chunk_threshold,
    )

    try:
        with _spinner() as progress:
            progress.add_task("Parsing article...", total=None)
            article = parse_url(url, timeout=settings.fetch_timeout)
    except ReferentError as e:
        _print_error(e)
        raise typer.Exit(1) from e

    _print_article(article, url)
    if not article.has_body:
        console.print("[red]No article content found[/red]")
        raise typer.Exit(1)

    num_chunks = len(split_text(article.body, options.chunk_threshold))
    tokens = count_tokens(article.body, settings.completion_model)
    console.print(f"[dim]~{tokens:,} tokens → {num_chunks} chunk(s)[/dim]")

    try:
        with _spinner() as progress:
            progress.add_task(f"Generating {action.value}...", total=None)
            result = run_action(CompletionClient(settings), action, article.body, options)
    except ReferentError as e:
        _print_error(e)
        raise typer.Exit(1) from e

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.text)
        console.print(f"[green]✓[/green] Saved to {out}")
    else:
        _print_result(action, result)


@app.command()
def image(
    prompt: Annotated[str, typer.Argument(help="Image description")],
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Output image file"),
    ] = None,
) -> None:
    """Generate an illustration from a prompt."""
    try:
        with _spinner() as progress:
            progress.add_task("Generating image...", total=None)
            generated = generate_image(prompt, settings=get_settings())
    except ReferentError as e:
        _print_error(e)
        raise typer.Exit(1) from e

    path = _save_image(out, generated)
    console.print(f"[green]✓[/green] Image from {generated.model} saved to {path}")


@app.command()
def shell() -> None:
    """Interactive session: parse articles and run actions on them."""
    settings = get_settings()
    client = CompletionClient(settings)
    options = DispatchOptions(
        language=settings.target_language, chunk_threshold=settings.chunk_threshold
    )
    session = Session(
        parser=lambda url: parse_url(url, timeout=settings.fetch_timeout),
        runner=lambda kind, text: run_action(client, kind, text, options),
    )
    console.print(f"[dim]{SHELL_HELP}[/dim]")

    while True:
        command = typer.prompt(f"referent [{session.state.value}]").strip()
        if command in ("quit", "exit"):
            break

        try:
            if command == "clear":
                session.clear()
                console.print("[dim]Cleared[/dim]")
            elif command.startswith(("http://", "https://")):
                with _spinner() as progress:
                    progress.add_task("Parsing article...", total=None)
                    article = session.parse(command)
                _print_article(article, command)
            elif command == "image":
                with _spinner() as progress:
                    progress.add_task("Generating image...", total=None)
                    prompt = session.run(ActionKind.IMAGE_PROMPT)
                    generated = generate_image(prompt.text.strip(), settings=settings)
                path = _save_image(None, generated)
                console.print(f"[green]✓[/green] Image from {generated.model} saved to {path}")
            elif command in {kind.value for kind in ActionKind}:
                kind = ActionKind(command)
                with _spinner() as progress:
                    progress.add_task(f"Generating {kind.value}...", total=None)
                    result = session.run(kind)
                _print_result(kind, result)
            else:
                console.print(f"[yellow]{SHELL_HELP}[/yellow]")
        except ReferentError as e:
            _print_error(e)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port")] = 8000,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("referent.server:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
