import sys, pathlib
from datetime import date
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest
import httpx
import requests
from notion_client.errors import HTTPResponseError
import config
from cli import tickets as tickets_cli
from cli import sync_freshdesk, create_tickets_db
from logic.sync import SyncContext
from logic.tickets import build_ticket_properties, split_tags, ticket_database_properties
from fakes import FakeNotion, FakeFreshdesk, customer_page

ENG = "eng-db"
TIX = "tix-db"


@pytest.fixture
def notion(monkeypatch):
    fake = FakeNotion()
    monkeypatch.setattr(config, "NOTION_TOKEN", "secret")
    monkeypatch.setattr(config, "SUPPORT_ENGAGEMENTS_DB", ENG)
    monkeypatch.setattr(config, "SUPPORT_TICKETS_DB", TIX)
    monkeypatch.setattr(tickets_cli, "NotionWorkspace", lambda *a, **k: fake)
    return fake


def test_build_ticket_properties_optional_fields():
    props = build_ticket_properties("c1", "Broken login", ticket_id="T-1", today=date(2024, 5, 6))
    assert props["Ticket ID"]["title"][0]["text"]["content"] == "T-1"
    assert props["Customer"]["relation"] == [{"id": "c1"}]
    assert props["Created Date"]["date"]["start"] == "2024-05-06"
    assert props["Status"]["select"]["name"] == "Open"
    assert props["Priority"]["select"]["name"] == "Medium"
    assert "FreshDesk ID" not in props and "Tags" not in props

    props = build_ticket_properties("c1", "x", ticket_id="T-2", freshdesk_id="881",
                                    tags=split_tags(" Bug, Billing ,,"))
    assert props["FreshDesk ID"]["rich_text"][0]["text"]["content"] == "881"
    assert props["Tags"]["multi_select"] == [{"name": "Bug"}, {"name": "Billing"}]


def test_ticket_schema_relates_to_registry():
    schema = ticket_database_properties("reg-123")
    assert schema["Ticket ID"] == {"title": {}}
    assert schema["Customer"]["relation"]["database_id"] == "reg-123"
    assert [o["name"] for o in schema["Priority"]["select"]["options"]] == ["Critical", "High", "Medium", "Low"]


def test_add_ticket_creates_page(notion, capsys):
    acme = notion.add(ENG, customer_page("Acme Corp", "1"))
    code = tickets_cli.main(["add", "Acme", "Login broken", "-t", "T-9", "-p", "High", "--tags", "Bug"])
    assert code == 0
    (page,) = notion.live(TIX)
    assert page["properties"]["Customer"]["relation"] == [{"id": acme["id"]}]
    assert page["properties"]["Priority"]["select"]["name"] == "High"
    assert "Ticket created successfully!" in capsys.readouterr().out


def test_add_ticket_unknown_customer_is_graceful(notion, capsys):
    assert tickets_cli.main(["add", "Nobody", "x"]) == 0
    assert notion.live(TIX) == []
    assert 'No customer found with name containing "Nobody"' in capsys.readouterr().out


def test_customer_listing_shows_relation_tickets(notion, capsys):
    acme = notion.add(ENG, customer_page("Acme", "1"))
    tickets_cli.main(["add", "Acme", "First issue", "-t", "T-1"])
    tickets_cli.main(["add", "Acme", "Second issue", "-t", "T-2", "-s", "Resolved"])
    capsys.readouterr()

    assert tickets_cli.main(["customer", "acme"]) == 0
    out = capsys.readouterr().out
    assert "Found 2 tickets for Acme" in out
    assert "T-1" in out and "Resolved" in out
    assert acme["id"] not in out


def test_list_resolves_customer_names(notion, capsys):
    notion.add(ENG, customer_page("Acme", "1"))
    tickets_cli.main(["add", "Acme", "First issue", "-t", "T-1"])
    capsys.readouterr()

    assert tickets_cli.main(["list", "--status", "Open"]) == 0
    out = capsys.readouterr().out
    assert "Found 1 tickets" in out
    assert "Acme" in out


def test_remote_error_exits_nonzero(notion, monkeypatch, capsys):
    def boom(*a, **k):
        raise requests.ConnectionError("network down")

    monkeypatch.setattr(notion, "query_database", boom)
    assert tickets_cli.main(["list"]) == 1
    assert "Error: network down" in capsys.readouterr().out


def test_notion_gateway_error_exits_nonzero(notion, monkeypatch, capsys):
    def boom(*a, **k):
        raise HTTPResponseError(httpx.Response(502, text="<html>Bad gateway</html>"))

    monkeypatch.setattr(notion, "query_database", boom)
    assert tickets_cli.main(["list"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_sync_cli_reports_connection_failure(monkeypatch, capsys):
    for name in sync_freshdesk.REQUIRED:
        monkeypatch.setattr(config, name, "set")
    notion = FakeNotion()

    def unreachable(*a, **k):
        raise httpx.ConnectError("connection reset")

    monkeypatch.setattr(notion, "query_database", unreachable)
    monkeypatch.setattr(sync_freshdesk, "build_context", lambda: SyncContext(
        notion=notion, freshdesk=FakeFreshdesk(), engagements_db=ENG, tickets_db=TIX,
    ))
    assert sync_freshdesk.main([]) == 1
    out = capsys.readouterr().out
    assert "Sync failed" in out
    assert "Error: connection reset" in out


def test_sync_cli_requires_all_settings(monkeypatch, capsys):
    monkeypatch.setattr(config, "NOTION_TOKEN", "secret")
    monkeypatch.setattr(config, "FRESHDESK_API_KEY", "")
    monkeypatch.setattr(config, "FRESHDESK_DOMAIN", "")
    monkeypatch.setattr(sync_freshdesk, "build_context",
                        lambda: (_ for _ in ()).throw(AssertionError("should not build clients")))
    with pytest.raises(SystemExit) as exc:
        sync_freshdesk.main([])
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "FRESHDESK_API_KEY" in out and "FRESHDESK_DOMAIN" in out
    assert "NOTION_TOKEN=" not in out


def test_create_tickets_db_without_parent_page(monkeypatch, capsys):
    fake = FakeNotion()
    assert create_tickets_db.run(fake) == 1
    assert "No pages found" in capsys.readouterr().out


def test_create_tickets_db_with_parent(monkeypatch, capsys):
    created = {}

    class Recording(FakeNotion):
        def create_database(self, parent_page_id, title, properties, icon=None):
            created.update(parent=parent_page_id, title=title, properties=properties, icon=icon)
            return {"id": "db-new", "url": "https://notion.test/db-new"}

    monkeypatch.setattr(config, "SUPPORT_ENGAGEMENTS_DB", ENG)
    assert create_tickets_db.run(Recording(), "parent-1") == 0
    assert created["parent"] == "parent-1"
    assert created["title"] == "Support Tickets"
    assert created["properties"]["Customer"]["relation"]["database_id"] == ENG
    assert "db-new" in capsys.readouterr().out
