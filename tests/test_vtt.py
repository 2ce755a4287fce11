"""
Tests for the WebVTT parser.
"""

import pytest

from caption_harvest.transcription import ParseFailureError, parse_vtt, parse_vtt_file
from caption_harvest.transcription.vtt import clean_cue_line, extract_cue_text


def _cue(*lines, start="00:00:00.000", end="00:00:01.000"):
    return "\n".join([f"{start} --> {end}", *lines]) + "\n"


def _document(*cues):
    return "WEBVTT\n\n" + "\n".join(cues)


def test_parse_sample_document(sample_vtt):
    assert parse_vtt(sample_vtt) == (
        "so today we are going to talk so today we are going to talk about python. It is great."
    )


def test_header_metadata_note_and_identifiers_are_skipped(sample_vtt):
    fragments = extract_cue_text(sample_vtt)

    assert "Kind: captions" not in fragments
    assert "Language: en" not in fragments
    assert not any(f.startswith("NOTE") for f in fragments)
    assert "1" not in fragments and "4" not in fragments
    assert fragments[0] == "so today we are going to talk"


def test_named_cue_identifier_is_skipped():
    content = "WEBVTT\n\nintro-cue\n" + _cue("Welcome back")

    assert extract_cue_text(content) == ["Welcome back"]


def test_multiline_cue_is_joined_with_spaces():
    content = _document(_cue("line one", "line   two"))

    assert parse_vtt(content) == "line one line two."


def test_blank_line_ends_cue_region():
    content = _document(_cue("inside"), "stray-text\n")

    assert extract_cue_text(content) == ["inside"]


def test_entities_are_decoded():
    content = _document(_cue("Tom &amp; Jerry &lt;laughs&gt;"))

    assert parse_vtt(content) == "Tom & Jerry <laughs>."


def test_tags_are_stripped_before_entities_are_decoded():
    # A real tag is removed; an escaped tag survives as literal text
    assert clean_cue_line("<i>Tom</i> &amp; Jerry") == "Tom & Jerry"
    assert clean_cue_line("&lt;b&gt;bold&lt;/b&gt;") == "<b>bold</b>"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("say &quot;hi&quot;", 'say "hi"'),
        ("it&#39;s", "it's"),
        ("a&nbsp;b", "a b"),
        ("<00:00:01.199><c> word</c>", "word"),
    ],
)
def test_clean_cue_line(line, expected):
    assert clean_cue_line(line) == expected


def test_duplicate_sentences_removed_case_insensitively():
    content = _document(_cue("Hello world."), _cue("hello WORLD."), _cue("Goodbye."))

    assert parse_vtt(content) == "Hello world. Goodbye."


def test_crlf_line_endings():
    content = "WEBVTT\r\n\r\n1\r\n00:00:00.000 --> 00:00:01.000\r\nHello there\r\n"

    assert parse_vtt(content) == "Hello there."


@pytest.mark.parametrize("content", ["", "WEBVTT\n", "WEBVTT\n\nNOTE nothing here\n", _document(_cue("<c></c>"))])
def test_documents_without_text_parse_to_empty(content):
    assert parse_vtt(content) == ""


def test_parse_vtt_file(tmp_path, sample_vtt):
    path = tmp_path / "abc.en.vtt"
    path.write_text(sample_vtt, encoding="utf-8")

    assert parse_vtt_file(path) == parse_vtt(sample_vtt)


def test_parse_vtt_file_missing(tmp_path):
    with pytest.raises(ParseFailureError):
        parse_vtt_file(tmp_path / "missing.vtt")


def test_parse_vtt_file_invalid_encoding(tmp_path):
    path = tmp_path / "broken.vtt"
    path.write_bytes(b"WEBVTT\n\n00:00:00.000 --> 00:00:01.000\n\xff\xfe\xfa\n")

    with pytest.raises(ParseFailureError) as excinfo:
        parse_vtt_file(path)
    assert excinfo.value.code == "parse_failure"
