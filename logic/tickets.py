from __future__ import annotations
import logging, time
from datetime import date

from config import (
    CUSTOMER_NAME_PROPERTY,
    TICKET_CREATED_PROPERTY,
    TICKET_CUSTOMER_PROPERTY,
    TICKET_FRESHDESK_PROPERTY,
    TICKET_ID_PROPERTY,
    TICKET_PRIORITY_PROPERTY,
    TICKET_STATUS_PROPERTY,
    TICKET_SUMMARY_PROPERTY,
    TICKET_TAGS_PROPERTY,
)

log = logging.getLogger(__name__)

TICKET_DATABASE_TITLE = "Support Tickets"
TICKET_DATABASE_ICON = "🎫"


def _options(*pairs):
    return {"options": [{"name": n, "color": c} for n, c in pairs]}


def ticket_database_properties(engagements_db: str) -> dict:
    """Fixed schema for the ticket database; the relation points at the customer registry."""
    return {
        TICKET_ID_PROPERTY: {"title": {}},
        TICKET_CUSTOMER_PROPERTY: {"relation": {
            "database_id": engagements_db,
            "single_property": {},
        }},
        TICKET_STATUS_PROPERTY: {"select": _options(
            ("Open", "red"), ("In Progress", "yellow"), ("Waiting on Customer", "orange"),
            ("Resolved", "green"), ("Closed", "gray"),
        )},
        TICKET_PRIORITY_PROPERTY: {"select": _options(
            ("Critical", "red"), ("High", "orange"), ("Medium", "yellow"), ("Low", "blue"),
        )},
        "Assignee": {"people": {}},
        TICKET_CREATED_PROPERTY: {"date": {}},
        "Last Updated": {"last_edited_time": {}},
        "Due Date": {"date": {}},
        TICKET_FRESHDESK_PROPERTY: {"rich_text": {}},
        TICKET_SUMMARY_PROPERTY: {"rich_text": {}},
        "Resolution": {"rich_text": {}},
        TICKET_TAGS_PROPERTY: {"multi_select": _options(
            ("Bug", "red"), ("Feature Request", "blue"), ("Configuration", "green"),
            ("Performance", "yellow"), ("Integration", "purple"), ("Billing", "pink"),
            ("Documentation", "gray"),
        )},
        "Time Spent (hours)": {"number": {"format": "number"}},
        "SLA Status": {"select": _options(
            ("Within SLA", "green"), ("At Risk", "yellow"), ("Breached", "red"),
        )},
    }


def find_parent_page(notion) -> dict | None:
    pages = notion.search(object_type="page", page_size=1)
    return pages[0] if pages else None


def create_ticket_database(notion, parent_page_id: str, engagements_db: str) -> dict:
    log.info("Creating %s database under %s", TICKET_DATABASE_TITLE, parent_page_id)
    return notion.create_database(
        parent_page_id,
        TICKET_DATABASE_TITLE,
        ticket_database_properties(engagements_db),
        icon=TICKET_DATABASE_ICON,
    )


def find_customers(notion, engagements_db: str, name: str) -> list[dict]:
    return list(notion.query_database(
        engagements_db,
        filter={"property": CUSTOMER_NAME_PROPERTY, "title": {"contains": name}},
    ))


def default_ticket_id() -> str:
    return f"TICKET-{int(time.time() * 1000)}"


def split_tags(raw: str | None) -> list[str]:
    return [t.strip() for t in (raw or "").split(",") if t.strip()]


def build_ticket_properties(customer_id: str, summary: str, *, ticket_id: str,
                            status: str = "Open", priority: str = "Medium",
                            freshdesk_id: str | None = None, tags: list[str] | None = None,
                            today: date | None = None) -> dict:
    today = today or date.today()
    props = {
        TICKET_ID_PROPERTY: {"title": [{"text": {"content": ticket_id}}]},
        TICKET_CUSTOMER_PROPERTY: {"relation": [{"id": customer_id}]},
        TICKET_SUMMARY_PROPERTY: {"rich_text": [{"text": {"content": summary}}]},
        TICKET_STATUS_PROPERTY: {"select": {"name": status}},
        TICKET_PRIORITY_PROPERTY: {"select": {"name": priority}},
        TICKET_CREATED_PROPERTY: {"date": {"start": today.isoformat()}},
    }
    if freshdesk_id:
        props[TICKET_FRESHDESK_PROPERTY] = {"rich_text": [{"text": {"content": freshdesk_id}}]}
    if tags:
        props[TICKET_TAGS_PROPERTY] = {"multi_select": [{"name": t} for t in tags]}
    return props


def query_tickets(notion, tickets_db: str, *, status: str | None = None,
                  customer_id: str | None = None, limit: int | None = None):
    flt = None
    if customer_id:
        flt = {"property": TICKET_CUSTOMER_PROPERTY, "relation": {"contains": customer_id}}
    elif status:
        flt = {"property": TICKET_STATUS_PROPERTY, "select": {"equals": status}}
    return notion.query_database(
        tickets_db,
        filter=flt,
        sorts=[{"property": TICKET_CREATED_PROPERTY, "direction": "descending"}],
        limit=limit,
    )
