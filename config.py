import os
import sys
import logging
from dotenv import load_dotenv

# Env vars first so LOG_LEVEL is honoured before anything logs.
load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def _as_int(v: str | None, default: int) -> int:
    try:
        return int(v) if v not in (None, "") else default
    except ValueError:
        return default

# Credentials and database ids; nothing remote works without these.
NOTION_TOKEN           = os.getenv("NOTION_TOKEN") or ""
FRESHDESK_API_KEY      = os.getenv("FRESHDESK_API_KEY") or ""
FRESHDESK_DOMAIN       = os.getenv("FRESHDESK_DOMAIN") or ""
SUPPORT_ENGAGEMENTS_DB = os.getenv("SUPPORT_ENGAGEMENTS_DB") or ""
SUPPORT_TICKETS_DB     = os.getenv("SUPPORT_TICKETS_DB") or ""

# Knobs.
HTTP_TIMEOUT        = float(os.getenv("HTTP_TIMEOUT", "12.0"))
FRESHDESK_PAGE_SIZE = _as_int(os.getenv("FRESHDESK_PAGE_SIZE"), 100)
NOTION_PAGE_SIZE    = _as_int(os.getenv("NOTION_PAGE_SIZE"), 100)

# What to tell people to put in .env when something is missing.
SETTING_HINTS = {
    "NOTION_TOKEN": "your_notion_integration_token",
    "FRESHDESK_API_KEY": "your_freshdesk_api_key",
    "FRESHDESK_DOMAIN": "your_domain.freshdesk.com",
    "SUPPORT_ENGAGEMENTS_DB": "your_support_engagements_database_id",
    "SUPPORT_TICKETS_DB": "your_support_tickets_database_id",
}

# Customer registry (Support Engagements) columns.
CUSTOMER_NAME_PROPERTY = "Company"
CUSTOMER_FD_ID_PROPERTY = "FD ID"

# Columns on the mirror written by the Freshdesk sync.
MIRROR_TITLE_PROPERTY    = "Title"
MIRROR_CUSTOMER_PROPERTY = "💁 Support Engagements"
MIRROR_STATUS_PROPERTY   = "Status"
MIRROR_CREATED_PROPERTY  = "Created"
MIRROR_AGENT_PROPERTY    = "Agent"

# Columns on the ticket database managed by the tickets CLI.
TICKET_ID_PROPERTY        = "Ticket ID"
TICKET_CUSTOMER_PROPERTY  = "Customer"
TICKET_STATUS_PROPERTY    = "Status"
TICKET_PRIORITY_PROPERTY  = "Priority"
TICKET_ASSIGNEE_PROPERTY  = "Assignee"
TICKET_CREATED_PROPERTY   = "Created Date"
TICKET_SUMMARY_PROPERTY   = "Issue Summary"
TICKET_FRESHDESK_PROPERTY = "FreshDesk ID"
TICKET_TAGS_PROPERTY      = "Tags"

# Freshdesk enums, straight from their API docs.
STATUS_LABELS = {
    2: "Open",
    3: "Pending",
    4: "Resolved",
    5: "Closed",
    6: "Waiting on Customer",
}
PRIORITY_LABELS = {
    1: "Low",
    2: "Medium",
    3: "High",
    4: "Urgent",
}
# Only these get mirrored; resolved/closed never show up in Notion.
ACTIVE_STATUSES = frozenset({2, 3, 6})

# Annotation the sync keeps on each customer page.
SYNC_MARKER = "Support Tickets (Last updated:"
SYNC_ANCHOR_HEADING = "System Information"


def missing_settings(*names: str) -> list[str]:
    """Return the names in ``names`` whose current value is empty."""
    module = sys.modules[__name__]
    return [n for n in names if not getattr(module, n, "")]


def require_settings(*names: str) -> None:
    missing = missing_settings(*names)
    if not missing:
        return
    print("Error: Missing required environment variables.")
    print("Please ensure your .env file contains:")
    for name in missing:
        print(f"  {name}={SETTING_HINTS.get(name, '...')}")
    sys.exit(1)
