import json

import pytest

from app.core.errors import ValidationError
from app.db.models.manual import BlockType
from app.domains.manuals.blocks import normalize_block_content


def test_heading_accepts_dict_and_string():
    from_dict = normalize_block_content(BlockType.HEADING1, {"text": "Intro"})
    from_string = normalize_block_content(BlockType.HEADING1, '{"text": "Intro"}')
    assert json.loads(from_dict) == {"text": "Intro"}
    assert from_dict == from_string


def test_empty_heading_gets_default_text():
    assert json.loads(normalize_block_content(BlockType.HEADING2, None)) == {"text": ""}


def test_body_is_stored_as_html():
    html = "<p>Hello <b>world</b></p>"
    assert normalize_block_content(BlockType.BODY, html) == html


def test_body_rejects_json_object():
    with pytest.raises(ValidationError):
        normalize_block_content(BlockType.BODY, {"text": "nope"})


def test_divider_must_be_empty():
    assert normalize_block_content(BlockType.DIVIDER, None) == ""
    with pytest.raises(ValidationError):
        normalize_block_content(BlockType.DIVIDER, "something")


def test_invalid_json_is_rejected():
    with pytest.raises(ValidationError):
        normalize_block_content(BlockType.CODE, "{not json")


def test_json_array_is_rejected():
    with pytest.raises(ValidationError):
        normalize_block_content(BlockType.TABLE, "[1, 2]")


def test_table_cells_must_fit_dimensions():
    ok = normalize_block_content(BlockType.TABLE, {"rows": 2, "cols": 2, "cells": {"1-1": "x"}})
    assert json.loads(ok)["cells"] == {"1-1": "x"}

    with pytest.raises(ValidationError) as exc_info:
        normalize_block_content(BlockType.TABLE, {"rows": 2, "cols": 2, "cells": {"2-0": "x"}})
    assert exc_info.value.details


def test_image_keeps_file_id_alias():
    content = normalize_block_content(BlockType.IMAGE, {"url": "/uploads/a.png", "fileId": "abc"})
    assert json.loads(content) == {"url": "/uploads/a.png", "fileId": "abc"}


def test_video_url_scheme_is_checked():
    with pytest.raises(ValidationError):
        normalize_block_content(BlockType.VIDEO, {"url": "javascript:alert(1)"})
