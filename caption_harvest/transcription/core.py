"""
Orchestrator for subtitle retrieval.
Single responsibility: walk the candidate list, return the first usable transcript.

Candidates are tried one at a time in priority order. A failed download or an
unreadable artifact only moves the loop on to the next candidate; the caller
sees InvalidUrlError or NoSubtitlesAvailableError. A missing scratch_dir is
created on demand.
"""

from __future__ import annotations

import logging
import tempfile
import time
import uuid
from logging import Logger
from pathlib import Path
from typing import Optional

from caption_harvest.logging_core.logger import get_logger, log_event, release_logger
from caption_harvest.transcription.cleaning import (
    REPETITION_WARNING_THRESHOLD,
    clean_transcript,
    repetition_ratio,
)
from caption_harvest.transcription.errors import (
    NoSubtitlesAvailableError,
    ParseFailureError,
    RetrievalFailedError,
)
from caption_harvest.transcription.retrieval import SubtitleRetriever, YtDlpRetriever, artifact_path
from caption_harvest.transcription.schema import CleanedTranscript, FetchConfig, SubtitleCandidate
from caption_harvest.transcription.video_id import VideoReference
from caption_harvest.transcription.vtt import parse_vtt_file

STAGE_NAME = "subtitle_fetch"


class SubtitleFetcher:
    """Fetch, parse and clean the first available subtitle track for a video."""

    def __init__(self, config: Optional[FetchConfig] = None, retriever: Optional[SubtitleRetriever] = None) -> None:
        self.config = config or FetchConfig()
        self.retriever = retriever or YtDlpRetriever(
            binary=self.config.yt_dlp_binary,
            timeout_seconds=self.config.timeout_seconds,
        )

    def fetch(self, url: str, run_id: Optional[uuid.UUID] = None) -> CleanedTranscript:
        """
        Return the cleaned transcript of the first candidate with usable text.

        Raises:
            InvalidUrlError: the URL is not a recognizable YouTube URL.
            NoSubtitlesAvailableError: every candidate failed or was empty.
            OSError: the configured scratch_dir could not be created.
        """
        owns_logger = run_id is None
        run_id = run_id or uuid.uuid4()
        logger = get_logger(run_id)
        try:
            return self._fetch(url, logger)
        finally:
            if owns_logger:
                release_logger(run_id)

    def _fetch(self, url: str, logger: Logger) -> CleanedTranscript:
        video = VideoReference.from_url(url)
        start = time.time()
        attempts = []

        log_event(
            logger,
            logging.INFO,
            "Starting subtitle fetch",
            stage_name=STAGE_NAME,
            event_type="start",
            metadata={"video_id": video.id, "candidates": [c.display_name for c in self.config.candidates]},
        )

        if self.config.scratch_dir:
            Path(self.config.scratch_dir).mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix=f"caption-harvest-{video.file_stem[:32]}-", dir=self.config.scratch_dir) as workdir:
            for candidate in self.config.candidates:
                attempts.append(candidate.display_name)
                text = self._try_candidate(video, candidate, Path(workdir), logger)
                if text:
                    log_event(
                        logger,
                        logging.INFO,
                        "Subtitle fetch succeeded",
                        stage_name=STAGE_NAME,
                        event_type="success",
                        metadata={
                            "video_id": video.id,
                            "candidate": candidate.display_name,
                            "chars": len(text),
                            "elapsed_sec": round(time.time() - start, 3),
                        },
                    )
                    return CleanedTranscript(text=text, language_code=candidate.language_code, attempts=attempts)

        log_event(
            logger,
            logging.WARNING,
            "No subtitles available",
            stage_name=STAGE_NAME,
            event_type="failure",
            metadata={"video_id": video.id, "attempts": attempts},
        )
        raise NoSubtitlesAvailableError(
            "No subtitles/transcript available for this video. "
            "The video may not have captions, or they may be disabled."
        )

    def _try_candidate(self, video: VideoReference, candidate: SubtitleCandidate, workdir: Path, logger: Logger) -> str:
        """Return cleaned text for one candidate, or "" if it yielded nothing usable."""
        expected = artifact_path(workdir, video, candidate)
        path = expected
        metadata = {"video_id": video.id, "candidate": candidate.display_name}

        log_event(logger, logging.INFO, "Attempting subtitle download", stage_name=STAGE_NAME, event_type="attempt", metadata=metadata)

        try:
            expected.unlink(missing_ok=True)
            path = self.retriever(video, candidate, workdir)

            if not path.exists():
                log_event(
                    logger,
                    logging.INFO,
                    "No subtitle artifact produced",
                    stage_name=STAGE_NAME,
                    event_type="candidate_failed",
                    metadata={**metadata, "cause": "no_artifact"},
                )
                return ""

            parsed = parse_vtt_file(path)
            ratio = repetition_ratio(parsed)
            if ratio > REPETITION_WARNING_THRESHOLD:
                log_event(
                    logger,
                    logging.WARNING,
                    "High repetition ratio in parsed subtitles",
                    stage_name=STAGE_NAME,
                    event_type="progress",
                    metadata={**metadata, "repetition_ratio": round(ratio, 2)},
                )

            cleaned = clean_transcript(parsed)
            log_event(
                logger,
                logging.INFO,
                "Subtitles parsed and cleaned",
                stage_name=STAGE_NAME,
                event_type="progress",
                metadata={**metadata, "parsed_chars": len(parsed), "cleaned_chars": len(cleaned)},
            )
            return cleaned

        except (RetrievalFailedError, ParseFailureError) as exc:
            log_event(
                logger,
                logging.WARNING,
                "Subtitle candidate failed",
                stage_name=STAGE_NAME,
                event_type="candidate_failed",
                metadata={**metadata, "cause": exc.code, "error": exc.message},
            )
            return ""

        finally:
            for artifact in {expected, path}:
                artifact.unlink(missing_ok=True)


def fetch_cleaned_transcript(
    url: str,
    config: Optional[FetchConfig] = None,
    retriever: Optional[SubtitleRetriever] = None,
    run_id: Optional[uuid.UUID] = None,
) -> CleanedTranscript:
    """Convenience wrapper around SubtitleFetcher.fetch."""
    return SubtitleFetcher(config, retriever).fetch(url, run_id=run_id)
