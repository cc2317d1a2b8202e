from __future__ import annotations
import textwrap

from logic.properties import CHECK, block_text


BOX = "☐"
TRIANGLE = "▶"
BULLET = "•"


def truncate(text: str, width: int) -> str:
    return text[:width] + ("..." if len(text) > width else "")


def render_table(head: list[str], rows: list[list[str]], widths: list[int]) -> str:
    """Plain box table with word-wrapped cells; ``widths`` include one space of padding per side."""
    def wrap(cell, w):
        inner = max(w - 2, 1)
        return textwrap.wrap(str(cell), inner) or [""]

    rule = "+" + "+".join("-" * w for w in widths) + "+"
    out = [rule]
    for i, row in enumerate([head] + rows):
        cells = [wrap(c, w) for c, w in zip(row, widths)]
        height = max(len(c) for c in cells)
        for line in range(height):
            parts = []
            for c, w in zip(cells, widths):
                text = c[line] if line < len(c) else ""
                parts.append(" " + text.ljust(w - 2) + " ")
            out.append("|" + "|".join(parts) + "|")
        if i == 0:
            out.append(rule)
    out.append(rule)
    return "\n".join(out)


def block_line(block: dict, number: int = 1) -> str:
    btype = block.get("type")
    text = block_text(block)
    if btype == "paragraph":
        return text
    if btype in {"heading_1", "heading_2", "heading_3"}:
        return "#" * int(btype[-1]) + " " + text
    if btype == "bulleted_list_item":
        return f"{BULLET} {text}"
    if btype == "numbered_list_item":
        return f"{number}. {text}"
    if btype == "to_do":
        return f"{CHECK if (block.get('to_do') or {}).get('checked') else BOX} {text}"
    if btype == "toggle":
        return f"{TRIANGLE} {text}"
    if btype == "code":
        lang = (block.get("code") or {}).get("language", "")
        return f"```{lang}\n{text}\n```"
    if btype == "quote":
        return f'" {text}'
    if btype == "divider":
        return "---"
    return f"[{btype}]"


def render_blocks(notion, block_id: str, indent: int = 0) -> list[str]:
    """Flatten a page's block tree to indented lines, recursing into children."""
    lines = []
    number = 0
    for block in notion.list_block_children(block_id):
        # Numbering restarts whenever a run of numbered siblings is broken.
        number = number + 1 if block.get("type") == "numbered_list_item" else 0
        line = block_line(block, number)
        if line:
            lines.append("  " * indent + line)
        if block.get("has_children"):
            lines.extend(render_blocks(notion, block["id"], indent + 1))
    return lines
