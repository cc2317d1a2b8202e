"""Check agent name resolution against a company's tickets.

    python -m debug.agents 153000304883
"""
import sys
import config
from logic.agents import AgentNameCache
from services.freshdesk import FreshdeskClient


def main(company_id: str, sample: int = 3) -> None:
    config.require_settings("FRESHDESK_API_KEY", "FRESHDESK_DOMAIN")
    fd = FreshdeskClient(config.FRESHDESK_DOMAIN, config.FRESHDESK_API_KEY, timeout=config.HTTP_TIMEOUT)
    agents = AgentNameCache(fd)
    tickets = fd.get("/api/v2/tickets", params={"company_id": company_id, "per_page": 5})
    print(f"Found {len(tickets)} tickets to test:")
    for t in tickets[:sample]:
        print(f"\nTicket: {t.get('subject')}")
        print(f"Responder ID: {t.get('responder_id') or 'None'}")
        if t.get("responder_id"):
            print(f"Agent Name: {agents.resolve(t['responder_id'])}")
        else:
            print("No responder assigned")
    print(f"\n{agents.lookups} agent lookups for {len(agents.names)} cached names")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m debug.agents <company_id>")
        sys.exit(2)
    main(sys.argv[1])
