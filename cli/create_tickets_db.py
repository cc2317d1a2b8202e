"""Create the Support Tickets database with its fixed property schema."""
from __future__ import annotations
import argparse, logging

import config
from cli.common import report_failure
from logic.properties import page_title
from logic.tickets import create_ticket_database, find_parent_page, ticket_database_properties
from services.errors import REMOTE_ERRORS
from services.notion import NotionWorkspace

log = logging.getLogger(__name__)


def run(notion: NotionWorkspace, parent_id: str | None = None) -> int:
    if not parent_id:
        parent = find_parent_page(notion)
        if parent is None:
            print("No pages found to create database in")
            print("Please create a page first or specify a parent page ID")
            return 1
        parent_id = parent["id"]
        print(f"Creating database in page: {page_title(parent) or 'Untitled'} ({parent_id})")

    db = create_ticket_database(notion, parent_id, config.SUPPORT_ENGAGEMENTS_DB)
    print("Support Tickets database created successfully!")
    print("\n✅ Database Details:")
    print("ID:", db.get("id"))
    print("URL:", db.get("url", ""))
    print("Parent Page:", parent_id)
    print("\n📋 Properties created:")
    for name, schema in ticket_database_properties(config.SUPPORT_ENGAGEMENTS_DB).items():
        kind = next(iter(schema))
        print(f"  • {name} ({kind})")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="create-tickets-db", description=__doc__)
    parser.add_argument("--parent", help="page id to create the database under (default: first page found)")
    args = parser.parse_args(argv)

    config.require_settings("NOTION_TOKEN", "SUPPORT_ENGAGEMENTS_DB")
    notion = NotionWorkspace(config.NOTION_TOKEN)
    try:
        return run(notion, args.parent)
    except REMOTE_ERRORS as e:
        return report_failure(e, "Make sure your NOTION_TOKEN has permission to create databases")


if __name__ == "__main__":
    raise SystemExit(main())
