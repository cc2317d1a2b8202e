"""Dump every Freshdesk company so I can copy ids into the FD ID column."""
import config
from services.freshdesk import FreshdeskClient


def main() -> None:
    config.require_settings("FRESHDESK_API_KEY", "FRESHDESK_DOMAIN")
    fd = FreshdeskClient(config.FRESHDESK_DOMAIN, config.FRESHDESK_API_KEY, timeout=config.HTTP_TIMEOUT)
    companies = sorted(fd.list_companies(), key=lambda c: (c.get("name") or "").lower())
    print(f"Found {len(companies)} companies in FreshDesk:\n")
    for c in companies:
        print(f"{c.get('name')} = {c.get('id')}")


if __name__ == "__main__":
    main()
