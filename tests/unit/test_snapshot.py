import json
import uuid

import pytest

from app.core.errors import BadRequestError
from app.db.models.manual import BlockType
from app.domains.manuals.entities import Manual, Section, Block
from app.domains.manuals.snapshot import build_snapshot, parse_snapshot, plan_restore


def make_manual():
    return Manual.create_manual("Guide", owner_id=uuid.uuid4(), team_id=uuid.uuid4(), description="About")


def test_snapshot_contains_flat_sections_with_parent_links():
    manual = make_manual()
    root = Section.create_section(manual.uuid, "Root", 0)
    child = Section.create_section(manual.uuid, "Child", 0, parent=root)
    block = Block.create_block(child.uuid, BlockType.BODY, "<p>x</p>", 0)

    data = json.loads(build_snapshot(manual, [child, root], [block]))

    assert data["title"] == "Guide"
    assert [s["title"] for s in data["sections"]] == ["Root", "Child"]
    assert data["sections"][1]["parentId"] == str(root.uuid)
    assert data["sections"][1]["blocks"][0]["content"] == "<p>x</p>"


def test_restore_plan_uses_fresh_ids_and_remaps_parents():
    manual = make_manual()
    root = Section.create_section(manual.uuid, "Root", 0)
    child = Section.create_section(manual.uuid, "Child", 1, parent=root)
    grandchild = Section.create_section(manual.uuid, "Leaf", 0, parent=child)
    block = Block.create_block(grandchild.uuid, BlockType.HEADING1, '{"text": "T"}', 0)

    snapshot = parse_snapshot(build_snapshot(manual, [root, child, grandchild], [block]))
    sections, blocks = plan_restore(manual.uuid, snapshot)

    assert [s.title for s in sections] == ["Root", "Child", "Leaf"]
    old_ids = {root.uuid, child.uuid, grandchild.uuid}
    assert not old_ids & {s.uuid for s in sections}
    assert sections[1].parent_id == sections[0].uuid
    assert sections[2].parent_id == sections[1].uuid
    assert [s.depth for s in sections] == [1, 2, 3]
    assert blocks[0].section_id == sections[2].uuid


def test_unknown_parent_becomes_root():
    snapshot = parse_snapshot(json.dumps({
        "title": "T",
        "sections": [{"id": "a", "title": "Orphan", "order": 0, "depth": 2, "parentId": "missing", "blocks": []}],
    }))
    sections, _ = plan_restore(uuid.uuid4(), snapshot)
    assert sections[0].parent_id is None
    assert sections[0].depth == 1


def test_cycle_is_reported_as_corrupted():
    snapshot = parse_snapshot(json.dumps({
        "title": "T",
        "sections": [
            {"id": "a", "title": "A", "parentId": "b"},
            {"id": "b", "title": "B", "parentId": "a"},
        ],
    }))
    with pytest.raises(BadRequestError):
        plan_restore(uuid.uuid4(), snapshot)


def test_too_deep_tree_is_reported_as_corrupted():
    sections = [{"id": "s0", "title": "S0"}] + [
        {"id": f"s{i}", "title": f"S{i}", "parentId": f"s{i - 1}"} for i in range(1, 4)
    ]
    snapshot = parse_snapshot(json.dumps({"title": "T", "sections": sections}))
    with pytest.raises(BadRequestError):
        plan_restore(uuid.uuid4(), snapshot)


@pytest.mark.parametrize("content", ["not json", "[]", '{"sections": []}'])
def test_malformed_snapshot_is_rejected(content):
    with pytest.raises(BadRequestError):
        parse_snapshot(content)
