"""Manage support tickets in Notion.

    tickets list --status Open --limit 20
    tickets customer Acme
    tickets add Acme "Login page times out" --priority High --tags Bug,Performance
"""
from __future__ import annotations
import argparse, logging

import config
from cli.common import report_failure
from logic.properties import format_date_only, format_property
from logic.render import render_table, truncate
from logic.tickets import (
    build_ticket_properties,
    default_ticket_id,
    find_customers,
    query_tickets,
    split_tags,
)
from services.errors import REMOTE_ERRORS
from services.notion import NotionWorkspace

log = logging.getLogger(__name__)

REQUIRED = ("NOTION_TOKEN", "SUPPORT_TICKETS_DB", "SUPPORT_ENGAGEMENTS_DB")


def cell(ticket: dict, prop_name: str) -> str:
    # Ticket tables only care whether a relation is set, not which ids.
    return format_date_only((ticket.get("properties") or {}).get(prop_name))


def customer_title(page: dict) -> str:
    return format_property((page.get("properties") or {}).get(config.CUSTOMER_NAME_PROPERTY))


def lookup_customer_name(notion: NotionWorkspace, ticket: dict, names: dict[str, str]) -> str:
    rel = ((ticket.get("properties") or {}).get(config.TICKET_CUSTOMER_PROPERTY) or {}).get("relation") or []
    if not rel:
        return ""
    cid = rel[0]["id"]
    if cid not in names:
        try:
            names[cid] = customer_title(notion.retrieve_page(cid))
        except REMOTE_ERRORS as e:
            log.debug("Customer %s lookup failed: %s", cid, e)
            return "Unknown"
    return names[cid]


def list_tickets(notion: NotionWorkspace, status: str | None = None, limit: int = 20) -> int:
    tickets = list(query_tickets(notion, config.SUPPORT_TICKETS_DB, status=status, limit=limit))
    print(f"Found {len(tickets)} tickets")
    if not tickets:
        print("No tickets found.")
        return 0
    names: dict[str, str] = {}
    rows = [[
        truncate(cell(t, config.TICKET_ID_PROPERTY), 30),
        truncate(lookup_customer_name(notion, t, names), 25),
        cell(t, config.TICKET_STATUS_PROPERTY),
        cell(t, config.TICKET_PRIORITY_PROPERTY),
        truncate(cell(t, config.TICKET_ASSIGNEE_PROPERTY), 20),
        cell(t, config.TICKET_CREATED_PROPERTY),
    ] for t in tickets]
    print(render_table(
        ["Ticket ID", "Customer", "Status", "Priority", "Assignee", "Created"],
        rows, [20, 20, 15, 10, 15, 12],
    ))
    return 0


def pick_customer(notion: NotionWorkspace, name: str, verbose: bool = True) -> dict | None:
    customers = find_customers(notion, config.SUPPORT_ENGAGEMENTS_DB, name)
    if not customers:
        print(f'No customer found with name containing "{name}"')
        return None
    if verbose and len(customers) > 1:
        print(f'Found {len(customers)} customers matching "{name}"')
        for c in customers:
            print(f"  • {customer_title(c)}")
        print("Using the first one.")
    return customers[0]


def list_customer_tickets(notion: NotionWorkspace, name: str) -> int:
    customer = pick_customer(notion, name)
    if customer is None:
        return 0
    title = customer_title(customer)
    tickets = list(query_tickets(notion, config.SUPPORT_TICKETS_DB, customer_id=customer["id"]))
    print(f"Found {len(tickets)} tickets for {title}")
    if not tickets:
        print("No tickets found for this customer.")
        return 0
    rows = [[
        truncate(cell(t, config.TICKET_ID_PROPERTY), 30),
        cell(t, config.TICKET_STATUS_PROPERTY),
        cell(t, config.TICKET_PRIORITY_PROPERTY),
        truncate(cell(t, config.TICKET_ASSIGNEE_PROPERTY), 20),
        cell(t, config.TICKET_CREATED_PROPERTY),
        truncate(cell(t, config.TICKET_SUMMARY_PROPERTY), 50),
    ] for t in tickets]
    print(render_table(
        ["Ticket ID", "Status", "Priority", "Assignee", "Created", "Summary"],
        rows, [15, 15, 10, 15, 12, 35],
    ))
    return 0


def add_ticket(notion: NotionWorkspace, customer_name: str, summary: str, *,
               ticket_id: str | None = None, status: str = "Open", priority: str = "Medium",
               freshdesk: str | None = None, tags: str | None = None,
               assignee: str | None = None) -> int:
    customer = pick_customer(notion, customer_name, verbose=False)
    if customer is None:
        return 0
    ticket_id = ticket_id or default_ticket_id()
    if assignee:
        print("Note: Assignee field requires Notion user ID")
    notion.create_page(config.SUPPORT_TICKETS_DB, build_ticket_properties(
        customer["id"], summary,
        ticket_id=ticket_id, status=status, priority=priority,
        freshdesk_id=freshdesk, tags=split_tags(tags),
    ))
    print("Ticket created successfully!")
    print("✓ Ticket Details:")
    print("  Customer:", customer_title(customer))
    print("  Ticket ID:", ticket_id)
    print("  Summary:", summary)
    print("  Status:", status)
    print("  Priority:", priority)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickets", description="Manage support tickets in Notion")
    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", help="List all tickets")
    ls.add_argument("-s", "--status", help="filter by status (Open, In Progress, Resolved, Closed)")
    ls.add_argument("-l", "--limit", type=int, default=20, help="limit number of tickets")

    cust = sub.add_parser("customer", help="List tickets for a specific customer")
    cust.add_argument("name")

    add = sub.add_parser("add", help="Add a new ticket for a customer")
    add.add_argument("customer")
    add.add_argument("summary")
    add.add_argument("-t", "--ticket-id", help="ticket ID (default: auto-generated)")
    add.add_argument("-s", "--status", default="Open", help="ticket status")
    add.add_argument("-p", "--priority", default="Medium", help="ticket priority")
    add.add_argument("-f", "--freshdesk", help="FreshDesk ticket ID")
    add.add_argument("--tags", help="comma-separated tags")
    add.add_argument("-a", "--assignee", help="assignee (requires Notion user ID)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config.require_settings(*REQUIRED)
    notion = NotionWorkspace(config.NOTION_TOKEN, page_size=config.NOTION_PAGE_SIZE)
    try:
        if args.command == "list":
            return list_tickets(notion, status=args.status, limit=args.limit)
        if args.command == "customer":
            return list_customer_tickets(notion, args.name)
        return add_ticket(
            notion, args.customer, args.summary,
            ticket_id=args.ticket_id, status=args.status, priority=args.priority,
            freshdesk=args.freshdesk, tags=args.tags, assignee=args.assignee,
        )
    except REMOTE_ERRORS as e:
        return report_failure(e, "Make sure your NOTION_TOKEN is set correctly in the .env file")


if __name__ == "__main__":
    raise SystemExit(main())
