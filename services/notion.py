from __future__ import annotations
import logging
from notion_client import Client
from notion_client.errors import APIResponseError, APIErrorCode
from logic.pagination import CursorPages

log = logging.getLogger(__name__)


def _pick(**kwargs) -> dict:
    # The SDK forwards whatever it gets; keep unset arguments out of the body.
    return {k: v for k, v in kwargs.items() if v is not None}


class NotionWorkspace:
    """The handful of Notion endpoints the scripts use, nothing more."""

    def __init__(self, token: str = "", client: Client | None = None, page_size: int = 100):
        self.client = client or Client(auth=token)
        self.page_size = page_size

    # Databases

    def retrieve_database(self, database_id: str) -> dict:
        return self.client.databases.retrieve(database_id=database_id)

    def retrieve_database_or_none(self, database_id: str) -> dict | None:
        try:
            return self.retrieve_database(database_id)
        except APIResponseError as e:
            if e.code == APIErrorCode.ObjectNotFound:
                log.info("Database %s not found", database_id)
                return None
            raise

    def query_database_page(self, database_id: str, *, filter: dict | None = None,
                            sorts: list | None = None, start_cursor: str | None = None,
                            page_size: int | None = None) -> dict:
        return self.client.databases.query(**_pick(
            database_id=database_id,
            filter=filter,
            sorts=sorts,
            start_cursor=start_cursor,
            page_size=page_size or self.page_size,
        ))

    def query_database(self, database_id: str, *, filter: dict | None = None,
                       sorts: list | None = None, page_size: int | None = None,
                       limit: int | None = None) -> CursorPages:
        if limit is not None and page_size is None:
            page_size = min(limit, self.page_size)

        def fetch(cursor):
            return self.query_database_page(
                database_id, filter=filter, sorts=sorts, start_cursor=cursor, page_size=page_size,
            )
        return CursorPages(fetch, limit=limit)

    def create_database(self, parent_page_id: str, title: str, properties: dict, icon: str | None = None) -> dict:
        return self.client.databases.create(**_pick(
            parent={"type": "page_id", "page_id": parent_page_id},
            title=[{"type": "text", "text": {"content": title}}],
            icon={"type": "emoji", "emoji": icon} if icon else None,
            properties=properties,
        ))

    # Pages

    def create_page(self, database_id: str, properties: dict) -> dict:
        return self.client.pages.create(parent={"database_id": database_id}, properties=properties)

    def retrieve_page(self, page_id: str) -> dict:
        return self.client.pages.retrieve(page_id=page_id)

    def archive_page(self, page_id: str) -> dict:
        return self.client.pages.update(page_id=page_id, archived=True)

    # Blocks

    def list_block_children(self, block_id: str) -> CursorPages:
        def fetch(cursor):
            return self.client.blocks.children.list(**_pick(block_id=block_id, start_cursor=cursor))
        return CursorPages(fetch)

    def append_block_children(self, block_id: str, children: list[dict], after: str | None = None) -> dict:
        return self.client.blocks.children.append(**_pick(block_id=block_id, children=children, after=after))

    def update_block(self, block_id: str, **fields) -> dict:
        return self.client.blocks.update(block_id=block_id, **fields)

    # Search

    def search(self, query: str | None = None, object_type: str | None = None,
               page_size: int | None = None) -> list[dict]:
        resp = self.client.search(**_pick(
            query=query,
            filter={"property": "object", "value": object_type} if object_type else None,
            page_size=page_size,
        ))
        return resp.get("results") or []
