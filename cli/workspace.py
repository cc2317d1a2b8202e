"""Inspect Notion databases from the terminal.

    notion-cli list
    notion-cli db "Support Tickets" --limit 10 --columns 4 --children
"""
from __future__ import annotations
import argparse, logging, re
from datetime import datetime

import config
from cli.common import report_failure
from logic.properties import database_title, format_property
from logic.render import render_blocks, render_table, truncate
from services.errors import REMOTE_ERRORS
from services.notion import NotionWorkspace

log = logging.getLogger(__name__)

UUID_RE = re.compile(r"^[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}$", re.I)
TOKEN_HINT = ("Make sure your NOTION_TOKEN is set correctly in the .env file\n"
              "and that your integration has access to the database.")
TABLE_WIDTH = 80
CELL_CHARS = 50


def looks_like_id(identifier: str) -> bool:
    return bool(UUID_RE.match(identifier)) or len(identifier.replace("-", "")) == 32


def _when(ts: str | None) -> str:
    if not ts:
        return ""
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return ts


def find_database_by_name(notion: NotionWorkspace, name: str) -> dict | None:
    hits = [
        db for db in notion.search(query=name, object_type="database")
        if name.lower() in database_title(db).lower()
    ]
    if not hits:
        print(f'No database found with name containing "{name}"')
        return None
    if len(hits) > 1:
        print(f"Found {len(hits)} databases:")
        for i, db in enumerate(hits, 1):
            print(f"  {i}. {database_title(db)} ({db['id']})")
        print("Using the first one. Specify ID for exact match.")
    return hits[0]


def get_database(notion: NotionWorkspace, identifier: str) -> dict | None:
    if looks_like_id(identifier):
        db = notion.retrieve_database_or_none(identifier)
        if db is None:
            print(f'Database with ID "{identifier}" not found')
        return db
    return find_database_by_name(notion, identifier)


def list_databases(notion: NotionWorkspace) -> int:
    dbs = notion.search(object_type="database")
    if not dbs:
        print("No databases found.")
        return 0
    print(f"\n📚 Found {len(dbs)} databases:\n")
    for i, db in enumerate(dbs, 1):
        print(f"{i}. {database_title(db)}")
        print(f"   ID: {db['id']}")
        print(f"   Last edited: {_when(db.get('last_edited_time'))}\n")
    return 0


def show_child_content(notion: NotionWorkspace, entries: list[dict], title_prop: str, child_limit: int) -> None:
    print("\n📄 Child Content:")
    for i, entry in enumerate(entries[:child_limit]):
        title = format_property(entry["properties"].get(title_prop)) or f"Entry {i + 1}"
        print(f"\n--- {title} ---")
        try:
            lines = render_blocks(notion, entry["id"])
        except REMOTE_ERRORS as e:
            # One unreadable page shouldn't hide the rest.
            log.warning("Could not fetch content for %s: %s", entry["id"], e)
            print(f"  (Could not fetch content: {e})")
            continue
        if lines:
            for line in lines:
                print(line)
        else:
            print("  (No content)")
    if len(entries) > child_limit:
        print(f"\n... and {len(entries) - child_limit} more entries")


def show_database(notion: NotionWorkspace, identifier: str, limit: int | None = None,
                  columns: int = 5, children: bool = False, child_limit: int = 5) -> int:
    db = get_database(notion, identifier)
    if db is None:
        return 0

    print("\n📊 Database Information")
    print("Name:", database_title(db))
    print("ID:", db["id"])
    print("Created:", _when(db.get("created_time")))
    print("Last edited:", _when(db.get("last_edited_time")))

    props = db.get("properties") or {}
    print("\n📋 Properties:")
    for name, prop in props.items():
        print(f"  {name}: {prop.get('type')}")

    entries = list(notion.query_database(db["id"], limit=limit))
    if not entries:
        print("\nNo entries found in this database.")
        return 0

    print(f"\n📝 Database Entries ({len(entries)} items):")
    names = list(props)[:columns]
    width = max(TABLE_WIDTH // max(len(names), 1), 4)
    rows = [
        [truncate(format_property(e["properties"].get(n)), CELL_CHARS) for n in names]
        for e in entries
    ]
    print(render_table(names, rows, [width] * len(names)))

    if children and names:
        show_child_content(notion, entries, names[0], child_limit)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notion-cli", description="CLI tool to interact with Notion databases")
    sub = parser.add_subparsers(dest="command", required=True)

    db = sub.add_parser("db", help="Retrieve and display a database by name or ID")
    db.add_argument("identifier")
    db.add_argument("-l", "--limit", type=int, help="limit number of entries to fetch")
    db.add_argument("-c", "--columns", type=int, default=5, help="number of columns to display")
    db.add_argument("--children", action="store_true", help="fetch and display child content blocks")
    db.add_argument("--child-limit", type=int, default=5,
                    help="limit number of entries to show child content for")

    sub.add_parser("list", help="List all accessible databases")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config.require_settings("NOTION_TOKEN")
    notion = NotionWorkspace(config.NOTION_TOKEN, page_size=config.NOTION_PAGE_SIZE)
    try:
        if args.command == "list":
            return list_databases(notion)
        return show_database(
            notion, args.identifier, limit=args.limit, columns=args.columns,
            children=args.children, child_limit=args.child_limit,
        )
    except REMOTE_ERRORS as e:
        return report_failure(e, TOKEN_HINT)


if __name__ == "__main__":
    raise SystemExit(main())
