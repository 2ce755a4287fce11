# caption_harvest/cli/youtube.py
"""
CLI entrypoint for caption-harvest.

Thin adapter, no business logic:
- ingest: run the ingestion pipeline and write a JSON artifact
- transcript: print the cleaned transcript of one video
- check: report whether yt-dlp is usable
"""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from caption_harvest.content_ingestor.output.writer import write_artifact
from caption_harvest.content_ingestor.runner import run_ingestion
from caption_harvest.logging_core.logger import get_logger, release_logger
from caption_harvest.transcription import (
    DEFAULT_CANDIDATES,
    FetchConfig,
    InvalidUrlError,
    NoSubtitlesAvailableError,
    candidates_for_languages,
    fetch_cleaned_transcript,
    is_yt_dlp_available,
)
from caption_harvest.transcription.schema import DEFAULT_TIMEOUT_SECONDS

EXIT_INVALID_URL = 2
EXIT_NO_SUBTITLES = 3

app = typer.Typer(
    name="caption-harvest",
    help="Fetch and clean YouTube subtitles",
    no_args_is_help=True,
)

LanguagesOption = typer.Option(
    None, "--lang", "-l", help="Subtitle language to try, in priority order (repeatable). Default: en, pl"
)
ScratchDirOption = typer.Option(
    None, "--scratch-dir", envvar="CAPTION_HARVEST_SCRATCH_DIR", help="Directory for temporary subtitle files"
)
TimeoutOption = typer.Option(
    DEFAULT_TIMEOUT_SECONDS, "--timeout", envvar="CAPTION_HARVEST_TIMEOUT", help="Seconds allowed per subtitle download"
)
BinaryOption = typer.Option("yt-dlp", "--yt-dlp", envvar="CAPTION_HARVEST_YT_DLP", help="yt-dlp executable")


@app.command()
def ingest(
    url: str = typer.Argument(..., help="YouTube video URL"),
    out: str = typer.Option("./output", "--out", "-o", help="Output directory for JSON artifact"),
    lang: Optional[List[str]] = LanguagesOption,
    scratch_dir: Optional[str] = ScratchDirOption,
    timeout: float = TimeoutOption,
    yt_dlp: str = BinaryOption,
    skip_metadata: bool = typer.Option(False, "--skip-metadata", help="Do not look up title and channel"),
    max_chunk_size: int = typer.Option(8000, "--max-chunk-size", help="Character budget per summary chunk"),
) -> None:
    """
    Ingest a YouTube video and write a structured JSON artifact.
    """
    output_path = Path(out).expanduser()
    typer.echo(f"Starting ingestion for: {url}")

    config: Dict[str, Any] = {
        "languages": lang or None,
        "scratch_dir": scratch_dir,
        "timeout_seconds": timeout,
        "yt_dlp_binary": yt_dlp,
        "fetch_metadata": not skip_metadata,
        "max_chunk_size": max_chunk_size,
    }

    try:
        content_object = run_ingestion(url, config=config)
        artifact_path = write_artifact(content_object, output_path)
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user.", err=True)
        sys.exit(1)
    except OSError as exc:
        typer.echo(typer.style("✗ Could not write artifact", fg=typer.colors.RED, bold=True), err=True)
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    typer.echo(f"Artifact written to: {artifact_path}")

    diagnostics = content_object.get("diagnostics", {})
    if diagnostics.get("errors"):
        typer.echo(typer.style("⚠ Completed with errors:", fg=typer.colors.YELLOW), err=True)
        for error in diagnostics["errors"]:
            typer.echo(f"  - {error}", err=True)
        sys.exit(1)

    typer.echo(typer.style("✓ Ingestion completed successfully!", fg=typer.colors.GREEN, bold=True))


@app.command()
def transcript(
    url: str = typer.Argument(..., help="YouTube video URL"),
    lang: Optional[List[str]] = LanguagesOption,
    scratch_dir: Optional[str] = ScratchDirOption,
    timeout: float = TimeoutOption,
    yt_dlp: str = BinaryOption,
) -> None:
    """
    Print the cleaned transcript of a video to stdout.

    Run logs go to stderr so stdout can be redirected to a file.
    """
    config = FetchConfig(
        candidates=candidates_for_languages(lang) if lang else DEFAULT_CANDIDATES,
        scratch_dir=scratch_dir,
        yt_dlp_binary=yt_dlp,
        timeout_seconds=timeout,
    )

    run_id = uuid.uuid4()
    get_logger(run_id, stream=sys.stderr)
    try:
        result = fetch_cleaned_transcript(url, config=config, run_id=run_id)
    except InvalidUrlError:
        typer.echo(typer.style("✗ Not a valid YouTube URL.", fg=typer.colors.RED, bold=True), err=True)
        raise typer.Exit(code=EXIT_INVALID_URL)
    except NoSubtitlesAvailableError:
        typer.echo(typer.style("✗ No captions available for this video.", fg=typer.colors.RED, bold=True), err=True)
        raise typer.Exit(code=EXIT_NO_SUBTITLES)
    finally:
        release_logger(run_id)

    typer.echo(f"[language: {result.language_code}]", err=True)
    typer.echo(result.text)


@app.command()
def check(yt_dlp: str = BinaryOption) -> None:
    """
    Check that yt-dlp is installed and runnable.
    """
    if is_yt_dlp_available(yt_dlp):
        typer.echo(typer.style(f"✓ {yt_dlp} is available", fg=typer.colors.GREEN))
        return
    typer.echo(typer.style(f"✗ {yt_dlp} is not installed or not on PATH", fg=typer.colors.RED), err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
