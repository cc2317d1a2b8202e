"""Mirror active Freshdesk tickets onto the Notion customer registry."""
from __future__ import annotations
import argparse, logging

import config
from cli.common import report_failure
from logic.sync import SyncContext, TicketSync
from services.errors import REMOTE_ERRORS
from services.freshdesk import FreshdeskClient
from services.notion import NotionWorkspace

log = logging.getLogger(__name__)

REQUIRED = (
    "NOTION_TOKEN",
    "FRESHDESK_API_KEY",
    "FRESHDESK_DOMAIN",
    "SUPPORT_ENGAGEMENTS_DB",
    "SUPPORT_TICKETS_DB",
)


def build_context() -> SyncContext:
    return SyncContext(
        notion=NotionWorkspace(config.NOTION_TOKEN, page_size=config.NOTION_PAGE_SIZE),
        freshdesk=FreshdeskClient(config.FRESHDESK_DOMAIN, config.FRESHDESK_API_KEY, timeout=config.HTTP_TIMEOUT),
        engagements_db=config.SUPPORT_ENGAGEMENTS_DB,
        tickets_db=config.SUPPORT_TICKETS_DB,
        page_size=config.FRESHDESK_PAGE_SIZE,
    )


def print_report(report) -> None:
    for c in report.customers:
        print(f"{c.name} (FD ID: {c.freshdesk_id}): archived {c.archived}, created {c.created}"
              + ("" if c.annotated else " [timestamp not updated]"))
    for name, err in report.failures:
        print(f"{name}: FAILED ({err})")
    print(f"\n✅ Sync complete! Created {report.total_created} total tickets.")


def main(argv=None) -> int:
    argparse.ArgumentParser(prog="sync-freshdesk", description=__doc__).parse_args(argv)
    config.require_settings(*REQUIRED)
    try:
        report = TicketSync(build_context()).run()
    except REMOTE_ERRORS as e:
        print("Sync failed")
        return report_failure(e)
    print_report(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
