"""
Tests for the subtitle fetch orchestrator.
"""

import json

import pytest

from caption_harvest.transcription import (
    FetchConfig,
    InvalidUrlError,
    NoSubtitlesAvailableError,
    SubtitleFetcher,
    candidates_for_languages,
    fetch_cleaned_transcript,
)

EN_AUTO = ("en", True)
EN_MANUAL = ("en", False)
PL_AUTO = ("pl", True)
PL_MANUAL = ("pl", False)

POLISH_VTT = """WEBVTT

00:00:00.000 --> 00:00:02.000
Dzień dobry wszystkim.

00:00:02.000 --> 00:00:04.000
Dzień dobry wszystkim.
"""


@pytest.fixture
def config(tmp_path):
    return FetchConfig(scratch_dir=str(tmp_path))


def test_falls_back_to_polish_auto(config, tmp_path, video_url, fake_retriever_factory, failing_retrieval):
    retriever = fake_retriever_factory({EN_AUTO: failing_retrieval, EN_MANUAL: None, PL_AUTO: POLISH_VTT})

    result = SubtitleFetcher(config, retriever).fetch(video_url)

    assert result.language_code == "pl"
    assert result.text == "Dzień dobry wszystkim."
    assert retriever.calls == [EN_AUTO, EN_MANUAL, PL_AUTO]
    assert result.attempts == ["English (auto)", "English (manual)", "Polish (auto)"]


def test_first_success_short_circuits(config, video_url, fake_retriever_factory, sample_vtt):
    retriever = fake_retriever_factory({EN_AUTO: sample_vtt, PL_AUTO: POLISH_VTT})

    result = SubtitleFetcher(config, retriever).fetch(video_url)

    assert result.language_code == "en"
    assert result.text == "so today we are going to talk about python. It is great."
    assert retriever.calls == [EN_AUTO]


def test_empty_track_moves_to_next_candidate(config, video_url, fake_retriever_factory, sample_vtt):
    retriever = fake_retriever_factory({EN_AUTO: "WEBVTT\n\n", EN_MANUAL: sample_vtt})

    result = SubtitleFetcher(config, retriever).fetch(video_url)

    assert result.language_code == "en"
    assert retriever.calls == [EN_AUTO, EN_MANUAL]


def test_unreadable_artifact_moves_to_next_candidate(config, tmp_path, video_url, fake_retriever_factory, sample_vtt):
    retriever = fake_retriever_factory({EN_AUTO: b"\xff\xfe\xfa", EN_MANUAL: sample_vtt})

    result = SubtitleFetcher(config, retriever).fetch(video_url)

    assert result.language_code == "en"
    assert retriever.calls == [EN_AUTO, EN_MANUAL]
    assert list(tmp_path.iterdir()) == []


def test_unreadable_artifact_after_missing_one(config, tmp_path, video_url, fake_retriever_factory):
    retriever = fake_retriever_factory({EN_AUTO: None, EN_MANUAL: b"\xff\xfe\xfa", PL_AUTO: POLISH_VTT})

    result = SubtitleFetcher(config, retriever).fetch(video_url)

    assert result.language_code == "pl"
    assert retriever.calls == [EN_AUTO, EN_MANUAL, PL_AUTO]
    assert list(tmp_path.iterdir()) == []


def test_unreadable_last_candidate_still_cleans_up(config, tmp_path, video_url, fake_retriever_factory):
    retriever = fake_retriever_factory({PL_MANUAL: b"\xff\xfe\xfa"})

    with pytest.raises(NoSubtitlesAvailableError):
        SubtitleFetcher(config, retriever).fetch(video_url)

    assert retriever.calls == [EN_AUTO, EN_MANUAL, PL_AUTO, PL_MANUAL]
    assert list(tmp_path.iterdir()) == []


def test_missing_scratch_dir_is_created(tmp_path, video_url, fake_retriever_factory, sample_vtt):
    scratch = tmp_path / "nested" / "scratch"
    retriever = fake_retriever_factory({EN_AUTO: sample_vtt})

    result = SubtitleFetcher(FetchConfig(scratch_dir=str(scratch)), retriever).fetch(video_url)

    assert result.language_code == "en"
    assert scratch.is_dir()
    assert list(scratch.iterdir()) == []


def test_no_candidate_succeeds(config, tmp_path, video_url, fake_retriever_factory, failing_retrieval):
    retriever = fake_retriever_factory({EN_AUTO: failing_retrieval, PL_MANUAL: "WEBVTT\n"})

    with pytest.raises(NoSubtitlesAvailableError) as excinfo:
        SubtitleFetcher(config, retriever).fetch(video_url)

    assert excinfo.value.code == "no_subtitles"
    assert retriever.calls == [EN_AUTO, EN_MANUAL, PL_AUTO, PL_MANUAL]
    assert list(tmp_path.iterdir()) == []


def test_invalid_url_never_calls_retriever(config, fake_retriever_factory):
    retriever = fake_retriever_factory()

    with pytest.raises(InvalidUrlError):
        SubtitleFetcher(config, retriever).fetch("https://vimeo.com/123")

    assert retriever.calls == []


def test_scratch_artifacts_removed_after_success(config, tmp_path, video_url, fake_retriever_factory, sample_vtt):
    retriever = fake_retriever_factory({EN_MANUAL: sample_vtt})

    SubtitleFetcher(config, retriever).fetch(video_url)

    assert list(tmp_path.iterdir()) == []
    assert all(workdir.parent == tmp_path for workdir in retriever.workdirs)


def test_artifact_removed_before_next_candidate(config, video_url, fake_retriever_factory, sample_vtt):
    seen_between_calls = []

    class CheckingRetriever(fake_retriever_factory):
        def __call__(self, video, candidate, workdir):
            seen_between_calls.append(sorted(p.name for p in workdir.iterdir()))
            return super().__call__(video, candidate, workdir)

    retriever = CheckingRetriever({EN_AUTO: "WEBVTT\n\n", EN_MANUAL: sample_vtt})
    SubtitleFetcher(config, retriever).fetch(video_url)

    assert seen_between_calls == [[], []]


def test_scratch_cleaned_when_unexpected_error_escapes(config, tmp_path, video_url, fake_retriever_factory):
    retriever = fake_retriever_factory({EN_AUTO: RuntimeError("boom")})

    with pytest.raises(RuntimeError):
        SubtitleFetcher(config, retriever).fetch(video_url)

    assert list(tmp_path.iterdir()) == []


def test_custom_candidate_order(tmp_path, video_url, fake_retriever_factory, sample_vtt):
    config = FetchConfig(candidates=candidates_for_languages(["de", "en"], prefer_auto=False), scratch_dir=str(tmp_path))
    retriever = fake_retriever_factory({("en", False): sample_vtt})

    result = fetch_cleaned_transcript(video_url, config=config, retriever=retriever)

    assert result.language_code == "en"
    assert retriever.calls == [("de", False), ("de", True), ("en", False)]


def test_candidate_failures_are_logged(config, video_url, fake_retriever_factory, failing_retrieval, sample_vtt, capsys):
    retriever = fake_retriever_factory({EN_AUTO: failing_retrieval, EN_MANUAL: sample_vtt})

    SubtitleFetcher(config, retriever).fetch(video_url)

    records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
    failed = [r for r in records if r.get("event_type") == "candidate_failed"]
    assert len(failed) == 1
    assert failed[0]["metadata"]["cause"] == "retrieval_failed"
    assert records[-1]["event_type"] == "success"
    assert len({r["run_id"] for r in records}) == 1
