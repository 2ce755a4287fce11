"""
Shared fixtures for the caption-harvest test suite.
"""

from pathlib import Path

import pytest

from caption_harvest.transcription.errors import RetrievalFailedError
from caption_harvest.transcription.retrieval import artifact_path


SAMPLE_VTT = """WEBVTT
Kind: captions
Language: en

NOTE generated for tests

1
00:00:00.000 --> 00:00:02.500 align:start position:0%
so today we are going to talk

2
00:00:02.500 --> 00:00:05.000 align:start position:0%
so today we are going to talk about python.

3
00:00:05.000 --> 00:00:07.000
<c.colorE5E5E5>It is great.</c>

4
00:00:07.000 --> 00:00:09.000
It is great.
"""


class FakeRetriever:
    """
    Stands in for yt-dlp.

    outcomes maps (language_code, is_auto_generated) to:
    - str: subtitle content written to the expected artifact path
    - bytes: raw bytes written to the artifact path
    - Exception instance: raised
    - None / missing: nothing written
    """

    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = []
        self.workdirs = []

    def __call__(self, video, candidate, workdir):
        key = (candidate.language_code, candidate.is_auto_generated)
        self.calls.append(key)
        self.workdirs.append(Path(workdir))
        path = artifact_path(workdir, video, candidate)

        outcome = self.outcomes.get(key)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, bytes):
            path.write_bytes(outcome)
        elif isinstance(outcome, str):
            path.write_text(outcome, encoding="utf-8")
        return path


@pytest.fixture
def sample_vtt():
    return SAMPLE_VTT


@pytest.fixture
def video_url():
    return "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@pytest.fixture
def failing_retrieval():
    return RetrievalFailedError("yt-dlp exited with status 1: ERROR: no subtitles")


@pytest.fixture
def fake_retriever_factory():
    return FakeRetriever
