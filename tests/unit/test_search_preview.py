from app.db.models.manual import BlockType
from app.domains.search.services import make_preview, highlight, PREVIEW_LENGTH


def test_body_preview_strips_tags_and_collapses_whitespace():
    assert make_preview(BlockType.BODY, "<p>Hello</p>\n\n<b>big</b>   world") == "Hello big world"


def test_heading_preview_uses_text():
    assert make_preview(BlockType.HEADING1, '{"text": "Getting started"}') == "Getting started"


def test_table_preview_is_fixed_label():
    assert make_preview(BlockType.TABLE, '{"rows": 1, "cols": 1, "cells": {}}') == "Table content"


def test_broken_json_falls_back_to_raw_text():
    assert make_preview(BlockType.HEADING2, "{broken") == "{broken"


def test_preview_is_truncated():
    assert len(make_preview(BlockType.CODE, "x" * 500)) == PREVIEW_LENGTH
    assert len(make_preview(BlockType.BODY, "y" * 500)) == PREVIEW_LENGTH


def test_highlight_is_case_insensitive_and_keeps_original_case():
    assert highlight("Deploy and deploy", "DEPLOY") == "<mark>Deploy</mark> and <mark>deploy</mark>"


def test_highlight_escapes_regex_characters():
    assert highlight("cost is $5 (approx.)", "(approx.)") == "cost is $5 <mark>(approx.)</mark>"
    assert highlight("a.b axb", ".") == "a<mark>.</mark>b axb"
