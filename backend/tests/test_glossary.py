import csv

import pytest

from meeting_translator.services.glossary import GlossaryStore, parse_glossary_csv, render_instruction


def test_malformed_row_is_dropped():
    assert parse_glossary_csv("en,vn\nhello,xin chao\n,missing") == {"hello": "xin chao"}


def test_header_row_is_skipped():
    assert parse_glossary_csv("term,translation") == {}


def test_duplicate_terms_keep_last_translation():
    raw = "en,vn\nhello,xin chao\nhello,chao ban\nbye,tam biet"
    assert parse_glossary_csv(raw) == {"hello": "chao ban", "bye": "tam biet"}


def test_rows_are_trimmed_and_quoted_fields_parsed():
    raw = 'en,vn\n  sprint  , giai doan \n"pull request, PR",yeu cau hop nhat\nonly-one-column'
    assert parse_glossary_csv(raw) == {
        "sprint": "giai doan",
        "pull request, PR": "yeu cau hop nhat",
    }


@pytest.mark.parametrize("raw", [None, "", "   \n"])
def test_empty_input(raw):
    assert parse_glossary_csv(raw) == {}


def test_render_instruction():
    instruction = render_instruction({"hello": "xin chao", "bye": "tam biet"})
    assert instruction == '"hello" → "xin chao", "bye" → "tam biet"'


def test_render_instruction_empty():
    assert render_instruction({}) == ""


def test_store_starts_empty():
    store = GlossaryStore()
    snapshot = store.snapshot()
    assert snapshot.version == 0
    assert len(snapshot) == 0
    assert snapshot.instruction == ""
    assert not store.has_upload


def test_store_replace_swaps_whole_table():
    store = GlossaryStore()
    store.replace("en,vn\nhello,xin chao\nbye,tam biet")

    snapshot = store.replace("en,vn\nthanks,cam on")

    assert snapshot.version == 2
    assert dict(snapshot.entries) == {"thanks": "cam on"}
    assert snapshot.instruction == '"thanks" → "cam on"'
    assert snapshot.raw_csv == "en,vn\nthanks,cam on"
    assert store.has_upload


def test_snapshot_is_immutable_and_isolated_from_later_uploads():
    store = GlossaryStore()
    store.replace("en,vn\nhello,xin chao")
    before = store.snapshot()

    store.replace("en,vn\nhello,chao")

    assert before.entries["hello"] == "xin chao"
    with pytest.raises(TypeError):
        before.entries["hello"] = "changed"


@pytest.mark.parametrize("raw", [
    "en,vn\rhello,xin chao\rbye,tam biet",
    "en,vn\r\nhello,xin chao\r\nbye,tam biet\r\n",
])
def test_carriage_return_line_endings(raw):
    assert parse_glossary_csv(raw) == {"hello": "xin chao", "bye": "tam biet"}


def test_unreadable_row_is_skipped_without_aborting():
    oversized = "a" * (csv.field_size_limit() + 1)
    raw = f"en,vn\nhello,xin chao\n{oversized},long\nbye,tam biet"
    assert parse_glossary_csv(raw) == {"hello": "xin chao", "bye": "tam biet"}
