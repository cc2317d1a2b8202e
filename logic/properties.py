from __future__ import annotations
import json, logging

log = logging.getLogger(__name__)

CHECK = "✓"
CROSS = "✗"
ARROW = "→"

# Every kind the formatter knows. Anything else is dumped raw.
PROPERTY_KINDS = frozenset({
    "title", "rich_text", "string",
    "number", "checkbox", "boolean",
    "select", "status", "multi_select",
    "date", "people", "files", "relation",
    "url", "email", "phone_number",
    "formula", "rollup", "array", "unique_id",
    "created_time", "created_by", "last_edited_time", "last_edited_by",
})

RELATION_STYLES = ("ids", "marker")


def plain_text(rich_text) -> str:
    parts = []
    for seg in rich_text or []:
        # Responses carry plain_text; payloads we built ourselves only have text.content.
        text = seg.get("plain_text")
        if text is None:
            text = (seg.get("text") or {}).get("content", "")
        parts.append(text)
    return "".join(parts)


def _user_name(user) -> str:
    user = user or {}
    return user.get("name") or user.get("id") or ""


def _nested(kind: str, container: dict) -> dict:
    # formula/rollup wrap their value as {"type": k, k: value}; re-shape it as a property.
    return {"type": kind, kind: container.get(kind)}


def format_property(prop: dict | None, relation_style: str = "ids") -> str:
    """Flatten one property value to display text.

    ``relation_style`` picks how relations read: ``"ids"`` joins the related
    page ids (database dumps), ``"marker"`` shows a check when anything is
    linked (ticket tables, where the ids are noise).
    """
    if not prop:
        return ""
    kind = prop.get("type")
    value = prop.get(kind) if kind else None

    if kind in {"title", "rich_text"}:
        return plain_text(value)
    if kind == "string":
        return value or ""
    if kind == "number":
        return "" if value is None else str(value)
    if kind in {"checkbox", "boolean"}:
        return CHECK if value else CROSS
    if kind in {"select", "status"}:
        return (value or {}).get("name", "")
    if kind == "multi_select":
        return ", ".join(opt.get("name", "") for opt in value or [])
    if kind == "date":
        if not value or not value.get("start"):
            return ""
        if value.get("end"):
            return f"{value['start']} {ARROW} {value['end']}"
        return value["start"]
    if kind == "people":
        return ", ".join(_user_name(p) for p in value or [])
    if kind == "files":
        return ", ".join(f.get("name", "") for f in value or [])
    if kind == "relation":
        if relation_style == "marker":
            return CHECK if value else ""
        return ", ".join(r.get("id", "") for r in value or [])
    if kind in {"url", "email", "phone_number", "created_time", "last_edited_time"}:
        return value or ""
    if kind in {"created_by", "last_edited_by"}:
        return _user_name(value)
    if kind == "unique_id":
        value = value or {}
        if value.get("number") is None:
            return ""
        prefix = value.get("prefix")
        return f"{prefix}-{value['number']}" if prefix else str(value["number"])
    if kind in {"formula", "rollup"}:
        if not value or not value.get("type"):
            return ""
        return format_property(_nested(value["type"], value), relation_style)
    if kind == "array":
        return ", ".join(format_property(item, relation_style) for item in value or [])

    log.debug("Unknown property kind %r; dumping raw", kind)
    return json.dumps(prop, ensure_ascii=False, default=str)


def format_date_only(prop: dict | None) -> str:
    """Timestamps trimmed to ``YYYY-MM-DD``; everything else as ``format_property``."""
    text = format_property(prop, relation_style="marker")
    if prop and prop.get("type") in {"created_time", "last_edited_time"}:
        return text[:10]
    return text


def page_title(page: dict, prop_name: str | None = None) -> str:
    props = page.get("properties") or {}
    if prop_name is not None:
        return format_property(props.get(prop_name))
    for prop in props.values():
        if prop.get("type") == "title":
            return plain_text(prop.get("title"))
    return ""


def database_title(db: dict) -> str:
    return plain_text(db.get("title")) or "Untitled"


def block_text(block: dict) -> str:
    body = block.get(block.get("type") or "") or {}
    return plain_text(body.get("rich_text"))
