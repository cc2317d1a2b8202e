"""Mirror active Freshdesk tickets into the Notion ticket database.

Every run rebuilds the mirror per customer: existing mirrored tickets are
archived and the currently active Freshdesk tickets are created fresh. Nothing
is updated in place, so a crashed run is repaired by simply running again.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from config import (
    ACTIVE_STATUSES,
    CUSTOMER_FD_ID_PROPERTY,
    CUSTOMER_NAME_PROPERTY,
    MIRROR_AGENT_PROPERTY,
    MIRROR_CREATED_PROPERTY,
    MIRROR_CUSTOMER_PROPERTY,
    MIRROR_STATUS_PROPERTY,
    MIRROR_TITLE_PROPERTY,
    STATUS_LABELS,
    SYNC_ANCHOR_HEADING,
    SYNC_MARKER,
)
from logic.agents import AgentNameCache
from logic.properties import block_text, format_property

log = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class SyncContext:
    notion: object
    freshdesk: object
    engagements_db: str
    tickets_db: str
    agents: AgentNameCache | None = None
    page_size: int = 100
    now: Callable[[], datetime] = _local_now

    def __post_init__(self):
        if self.agents is None:
            self.agents = AgentNameCache(self.freshdesk)


@dataclass
class CustomerResult:
    customer_id: str
    name: str
    freshdesk_id: str
    fetched: int = 0
    archived: int = 0
    created: int = 0
    annotated: bool = False


@dataclass
class SyncReport:
    customers: list[CustomerResult] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total_created(self) -> int:
        return sum(c.created for c in self.customers)


def customer_name(page: dict) -> str:
    return format_property((page.get("properties") or {}).get(CUSTOMER_NAME_PROPERTY)) or "Unknown"


def customer_freshdesk_id(page: dict) -> str:
    return format_property((page.get("properties") or {}).get(CUSTOMER_FD_ID_PROPERTY)).strip()


def annotation_text(when: datetime, count: int) -> str:
    stamp = when.strftime("%b %d, %Y, %I:%M:%S %p %Z").strip()
    return f"📅 {SYNC_MARKER} {stamp} - {count} active tickets)"


def _paragraph(text: str) -> dict:
    return {"paragraph": {"rich_text": [{"text": {"content": text}}]}}


def locate_annotation(blocks: list[dict]) -> tuple[str | None, str | None]:
    """Return ``(existing_marker_block_id, insert_after_block_id)``.

    The marker is a paragraph containing ``SYNC_MARKER``. Without one, new
    text goes after the last block of the ``SYNC_ANCHOR_HEADING`` section
    (which ends at the next heading or an older marker-ish paragraph).
    """
    insert_after = None
    for i, block in enumerate(blocks):
        btype = block.get("type")
        if btype == "paragraph" and SYNC_MARKER in block_text(block):
            return block.get("id"), None
        if btype == "heading_1" and SYNC_ANCHOR_HEADING in block_text(block):
            for j in range(i + 1, len(blocks)):
                nxt = blocks[j]
                ntype = nxt.get("type")
                if ntype in {"heading_1", "heading_2"} or (
                    ntype == "paragraph" and "Support Tickets" in block_text(nxt)
                ):
                    insert_after = blocks[j - 1].get("id")
                    break
            if insert_after is None and i < len(blocks) - 1:
                insert_after = blocks[-1].get("id")
    return None, insert_after


class TicketSync:
    def __init__(self, ctx: SyncContext):
        self.ctx = ctx

    # Steps

    def customers(self):
        """Registry rows with something in the Freshdesk id column, in query order."""
        return self.ctx.notion.query_database(
            self.ctx.engagements_db,
            filter={"property": CUSTOMER_FD_ID_PROPERTY, "rich_text": {"is_not_empty": True}},
        )

    def fetch_active_tickets(self, freshdesk_id: str) -> tuple[int, list[dict]]:
        tickets = self.ctx.freshdesk.list_company_tickets(freshdesk_id, page_size=self.ctx.page_size)
        active = [t for t in tickets if t.get("status") in ACTIVE_STATUSES]
        return len(tickets), active

    def archive_mirrored(self, customer_id: str) -> int:
        # Collect first; archiving while paging would shift the cursor under us.
        existing = list(self.ctx.notion.query_database(
            self.ctx.tickets_db,
            filter={"property": MIRROR_CUSTOMER_PROPERTY, "relation": {"contains": customer_id}},
        ))
        for page in existing:
            self.ctx.notion.archive_page(page["id"])
        return len(existing)

    def mirror_properties(self, ticket: dict, customer_id: str, agent_name: str) -> dict:
        title = f"FD-{ticket['id']}: {ticket.get('subject') or ''}"
        created = (ticket.get("created_at") or "").split("T")[0]
        props = {
            MIRROR_TITLE_PROPERTY: {"title": [{"text": {
                "content": title,
                "link": {"url": self.ctx.freshdesk.ticket_url(ticket["id"])},
            }}]},
            MIRROR_CUSTOMER_PROPERTY: {"relation": [{"id": customer_id}]},
            MIRROR_STATUS_PROPERTY: {"select": {"name": STATUS_LABELS.get(ticket.get("status"), "Open")}},
            MIRROR_AGENT_PROPERTY: {"rich_text": [{"text": {"content": agent_name or "Unassigned"}}]},
        }
        if created:
            props[MIRROR_CREATED_PROPERTY] = {"date": {"start": created}}
        return props

    def create_mirrored(self, ticket: dict, customer_id: str) -> dict:
        agent_name = self.ctx.agents.resolve(ticket.get("responder_id"))
        return self.ctx.notion.create_page(
            self.ctx.tickets_db, self.mirror_properties(ticket, customer_id, agent_name),
        )

    def update_annotation(self, customer_id: str, count: int) -> bool:
        """Best effort; a page we can't annotate doesn't fail the customer."""
        text = annotation_text(self.ctx.now(), count)
        try:
            blocks = list(self.ctx.notion.list_block_children(customer_id))
            marker_id, insert_after = locate_annotation(blocks)
            if marker_id:
                self.ctx.notion.update_block(marker_id, paragraph=_paragraph(text)["paragraph"])
            elif insert_after:
                self.ctx.notion.append_block_children(
                    customer_id, [_paragraph("\n"), _paragraph(text)], after=insert_after,
                )
            else:
                self.ctx.notion.append_block_children(customer_id, [_paragraph(text)])
            return True
        except Exception as e:
            log.warning("Could not update timestamp on customer page %s: %s", customer_id, e)
            return False

    def sync_customer(self, page: dict) -> CustomerResult | None:
        result = CustomerResult(
            customer_id=page["id"],
            name=customer_name(page),
            freshdesk_id=customer_freshdesk_id(page),
        )
        if not result.freshdesk_id:
            log.info("Skipping %s: blank Freshdesk id", result.name)
            return None

        log.info("Processing %s (FD ID: %s)", result.name, result.freshdesk_id)
        result.fetched, tickets = self.fetch_active_tickets(result.freshdesk_id)
        log.info("Found %d open/pending tickets (%d total)", len(tickets), result.fetched)

        result.archived = self.archive_mirrored(result.customer_id)
        if result.archived:
            log.info("Archived %d existing tickets for %s", result.archived, result.name)

        for ticket in tickets:
            self.create_mirrored(ticket, result.customer_id)
            result.created += 1
        if tickets:
            log.info("Created %d tickets for %s", result.created, result.name)
        else:
            log.info("No active tickets to sync for %s", result.name)

        result.annotated = self.update_annotation(result.customer_id, result.created)
        return result

    # Whole run

    def run(self) -> SyncReport:
        report = SyncReport()
        for page in self.customers():
            try:
                result = self.sync_customer(page)
            except Exception as e:
                name = customer_name(page)
                log.error("❌ Error processing %s: %s", name, e)
                report.failures.append((name, str(e)))
                continue
            if result is not None:
                report.customers.append(result)
        log.info("✅ Sync complete! Created %d total tickets.", report.total_created)
        return report
