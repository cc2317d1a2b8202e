import sys, pathlib, json
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from logic.properties import format_property, format_date_only, page_title, block_text
from fakes import rich


def test_multi_select_joins_labels_in_order():
    prop = {"type": "multi_select", "multi_select": [{"name": "Bug"}, {"name": "Billing"}]}
    assert format_property(prop) == "Bug, Billing"


def test_dates():
    assert format_property({"type": "date", "date": None}) == ""
    assert format_property({"type": "date", "date": {"start": "2024-01-01", "end": None}}) == "2024-01-01"
    rng = {"type": "date", "date": {"start": "2024-01-01", "end": "2024-01-05"}}
    assert format_property(rng) == "2024-01-01 → 2024-01-05"


def test_text_kinds_concatenate_segments():
    prop = {"type": "rich_text", "rich_text": rich("Hello, ") + rich("world")}
    assert format_property(prop) == "Hello, world"
    assert format_property({"type": "title", "title": []}) == ""


def test_selects_and_status():
    assert format_property({"type": "select", "select": {"name": "High"}}) == "High"
    assert format_property({"type": "select", "select": None}) == ""
    assert format_property({"type": "status", "status": {"name": "Done"}}) == "Done"


def test_scalars():
    assert format_property({"type": "number", "number": 3}) == "3"
    assert format_property({"type": "number", "number": None}) == ""
    assert format_property({"type": "checkbox", "checkbox": True}) == "✓"
    assert format_property({"type": "checkbox", "checkbox": False}) == "✗"
    assert format_property({"type": "url", "url": None}) == ""
    assert format_property({"type": "email", "email": "a@b.test"}) == "a@b.test"


def test_people_and_audit_fields():
    people = {"type": "people", "people": [{"name": "Dana", "id": "u1"}, {"id": "u2"}]}
    assert format_property(people) == "Dana, u2"
    assert format_property({"type": "created_by", "created_by": {"id": "u9"}}) == "u9"
    ts = {"type": "last_edited_time", "last_edited_time": "2024-02-03T04:05:00.000Z"}
    assert format_property(ts) == "2024-02-03T04:05:00.000Z"
    assert format_date_only(ts) == "2024-02-03"


def test_relation_styles():
    rel = {"type": "relation", "relation": [{"id": "a"}, {"id": "b"}]}
    assert format_property(rel) == "a, b"
    assert format_property(rel, relation_style="marker") == "✓"
    assert format_property({"type": "relation", "relation": []}, relation_style="marker") == ""


def test_formula_and_rollup_recurse():
    assert format_property({"type": "formula", "formula": {"type": "string", "string": "x"}}) == "x"
    assert format_property({"type": "formula", "formula": {"type": "number", "number": 2.5}}) == "2.5"
    rollup = {"type": "rollup", "rollup": {"type": "array", "array": [
        {"type": "select", "select": {"name": "A"}},
        {"type": "number", "number": 4},
    ]}}
    assert format_property(rollup) == "A, 4"
    date_rollup = {"type": "rollup", "rollup": {"type": "date", "date": {"start": "2024-01-01"}}}
    assert format_property(date_rollup) == "2024-01-01"


def test_empty_formula_and_rollup():
    assert format_property({"type": "formula", "formula": None}) == ""
    assert format_property({"type": "formula", "formula": {}}) == ""
    assert format_property({"type": "rollup", "rollup": {"function": "count"}}) == ""


def test_unique_id():
    assert format_property({"type": "unique_id", "unique_id": {"prefix": "SUP", "number": 12}}) == "SUP-12"
    assert format_property({"type": "unique_id", "unique_id": {"prefix": None, "number": 3}}) == "3"


def test_unknown_kind_dumps_raw():
    prop = {"type": "verification", "verification": {"state": "verified"}}
    assert json.loads(format_property(prop)) == prop


def test_missing_property():
    assert format_property(None) == ""
    assert format_property({}) == ""


def test_page_title_and_block_text():
    page = {"properties": {"Name": {"type": "title", "title": rich("Acme")},
                           "FD": {"type": "rich_text", "rich_text": rich("1")}}}
    assert page_title(page) == "Acme"
    assert page_title(page, "FD") == "1"
    block = {"type": "heading_1", "heading_1": {"rich_text": rich("System Information")}}
    assert block_text(block) == "System Information"
