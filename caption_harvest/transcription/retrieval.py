"""
yt-dlp subtitle retrieval.
Single responsibility: invoke the external downloader for one candidate.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Protocol

from caption_harvest.transcription.errors import RetrievalFailedError
from caption_harvest.transcription.schema import DEFAULT_TIMEOUT_SECONDS, SubtitleCandidate
from caption_harvest.transcription.video_id import VideoReference

SUBTITLE_FORMAT = "vtt"


class SubtitleRetriever(Protocol):
    """Downloads one candidate's subtitle track into workdir and returns the expected artifact path."""

    def __call__(self, video: VideoReference, candidate: SubtitleCandidate, workdir: Path) -> Path:
        ...


def artifact_path(workdir: Path, video: VideoReference, candidate: SubtitleCandidate) -> Path:
    """yt-dlp names subtitle files <output stem>.<lang>.<ext>."""
    return Path(workdir) / f"{video.file_stem}.{candidate.language_code}.{SUBTITLE_FORMAT}"


def build_command(binary: str, video: VideoReference, candidate: SubtitleCandidate, workdir: Path) -> list:
    output_template = str(Path(workdir) / f"{video.file_stem}.%(ext)s")
    return [
        binary,
        "--write-auto-subs" if candidate.is_auto_generated else "--write-subs",
        "--sub-langs", candidate.language_code,
        "--sub-format", SUBTITLE_FORMAT,
        "--skip-download",
        "--no-playlist",
        "--output", output_template,
        video.source_url,
    ]


class YtDlpRetriever:
    """Runs the yt-dlp CLI as a subprocess, one call per candidate."""

    def __init__(self, binary: str = "yt-dlp", timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    def __call__(self, video: VideoReference, candidate: SubtitleCandidate, workdir: Path) -> Path:
        command = build_command(self.binary, video, candidate, workdir)
        try:
            subprocess.run(
                command,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_seconds,
            )
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise RetrievalFailedError(
                f"yt-dlp exited with status {exc.returncode}: {stderr[-500:]}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise RetrievalFailedError(f"yt-dlp timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise RetrievalFailedError(f"Could not run {self.binary}: {exc}") from exc

        return artifact_path(workdir, video, candidate)


def is_yt_dlp_available(binary: str = "yt-dlp") -> bool:
    """True if `<binary> --version` runs and prints something."""
    try:
        completed = subprocess.run(
            [binary, "--version"],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=30,
        )
    except (OSError, subprocess.SubprocessError):
        return False
    return bool(completed.stdout.strip())
