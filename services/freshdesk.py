from __future__ import annotations
import logging
import requests
from requests.adapters import HTTPAdapter
from logic.pagination import NumberedPages

log = logging.getLogger(__name__)


def normalize_domain(domain: str) -> str:
    """``acme`` -> ``acme.freshdesk.com``; full hosts and URLs are trimmed to the host."""
    host = (domain or "").strip()
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix):]
    host = host.rstrip("/")
    if host and "." not in host:
        host = f"{host}.freshdesk.com"
    return host


class FreshdeskClient:
    def __init__(self, domain: str, api_key: str, timeout: float = 12.0, session: requests.Session | None = None):
        self.host = normalize_domain(domain)
        self.timeout = timeout
        # One session per run: connection reuse plus Basic auth on every call.
        self.session = session or requests.Session()
        self.session.auth = (api_key, "X")
        self.session.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=4))

    def url(self, path: str) -> str:
        return f"https://{self.host}{path}"

    def ticket_url(self, ticket_id) -> str:
        return self.url(f"/support/tickets/{ticket_id}")

    def get(self, path: str, params: dict | None = None):
        r = self.session.get(self.url(path), params=params, timeout=self.timeout)
        if not r.ok:
            log.error("❌ FD GET %s -> %s %s", path, r.status_code, r.text[:800])
        r.raise_for_status()
        return r.json()

    def list_company_tickets(self, company_id, page_size: int = 100) -> list[dict]:
        def fetch(page: int):
            return self.get(
                "/api/v2/tickets",
                params={"company_id": company_id, "per_page": page_size, "page": page},
            )
        return list(NumberedPages(fetch, page_size))

    def list_companies(self, page_size: int = 100) -> list[dict]:
        def fetch(page: int):
            return self.get("/api/v2/companies", params={"per_page": page_size, "page": page})
        return list(NumberedPages(fetch, page_size))

    def get_agent(self, agent_id) -> dict:
        return self.get(f"/api/v2/agents/{agent_id}")
