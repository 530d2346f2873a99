import datetime as dt

import pytest

from reportsite.content import (
    CodeFenceTracker,
    ReportMetadata,
    load_metadata,
    normalize_list_spacing,
    normalize_newlines,
    parse_metadata,
    split_front_matter,
)
from reportsite.errors import ContentError

from conftest import report_text


def test_parse_metadata_reads_title_and_date():
    meta = parse_metadata(report_text(title="Outage", date="2024-01-01"))
    assert meta == ReportMetadata(title="Outage", date=dt.date(2024, 1, 1), update_date=None)
    assert meta.effective_date == dt.date(2024, 1, 1)


def test_update_date_overrides_effective_date():
    meta = parse_metadata(report_text(title="Outage", date="2024-01-01", update_date="2024-02-10"))
    assert meta.update_date == dt.date(2024, 2, 10)
    assert meta.effective_date == dt.date(2024, 2, 10)


def test_null_update_date_is_absent():
    meta = parse_metadata(report_text(title="Outage", date="2024-01-01", update_date="null"))
    assert meta.update_date is None


def test_quoted_dates_and_datetimes_become_calendar_dates():
    meta = parse_metadata(report_text(title="Outage", date="'2024-03-04'", update_date="2024-03-05 10:30:00"))
    assert meta.date == dt.date(2024, 3, 4)
    assert meta.update_date == dt.date(2024, 3, 5)


def test_unknown_keys_are_ignored():
    meta = parse_metadata(report_text(title="Outage", date="2024-01-01", extra="severity: high"))
    assert meta.title == "Outage"


def test_numeric_title_is_converted_to_text():
    meta = parse_metadata(report_text(title="2024", date="2024-01-01"))
    assert meta.title == "2024"


@pytest.mark.parametrize(
    "text",
    [
        report_text(date="2024-01-01"),
        report_text(title="Outage"),
        report_text(title="''", date="2024-01-01"),
        report_text(title="Outage", date="yesterday"),
        report_text(title="Outage", date="2024-01-01", update_date="soon"),
        "---\n- just\n- a list\n---\nBody\n",
        "No front matter here.\n",
        "---\ntitle: Outage\ndate: 2024-01-01\n",
    ],
)
def test_invalid_front_matter_raises_content_error(text):
    with pytest.raises(ContentError):
        parse_metadata(text)


def test_content_error_names_source(tmp_path):
    source = tmp_path / "broken.md"
    with pytest.raises(ContentError, match="broken.md"):
        parse_metadata(report_text(date="2024-01-01"), source)


def test_split_front_matter_accepts_document_end_marker():
    block, body = split_front_matter("---\ntitle: A\n...\n# Heading\n")
    assert block == "title: A"
    assert body == "# Heading\n"


def test_normalize_newlines():
    assert normalize_newlines("\ufeffa\r\nb\rc\n") == "a\nb\nc\n"


def test_normalize_list_spacing_separates_list_from_paragraph():
    text = "Intro\n- one\n- two"
    assert normalize_list_spacing(text) == "Intro\n\n- one\n- two"


def test_normalize_list_spacing_ignores_code_fences():
    text = "```\nIntro\n- one\n```"
    assert normalize_list_spacing(text) == text


def test_load_metadata_reads_split_block():
    block, body = split_front_matter(report_text(title="Outage", date="2024-01-01", body="Text\n"))
    assert load_metadata(block).title == "Outage"
    assert body == "Text\n"


def test_code_fence_closes_on_longer_fence_only():
    fences = CodeFenceTracker()
    states = [fences.feed(line) for line in ["````", "```", "- item", "`````", "after"]]
    assert states == [True, True, True, True, False]


def test_normalize_list_spacing_waits_for_matching_fence():
    text = "````\n```\nIntro\n- one\n````\nIntro\n- two"
    assert normalize_list_spacing(text) == "````\n```\nIntro\n- one\n````\nIntro\n\n- two"
