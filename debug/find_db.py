"""Where does SUPPORT_TICKETS_DB live? Prints the database and its parent page."""
import config
from logic.properties import database_title, page_title
from services.errors import REMOTE_ERRORS
from services.notion import NotionWorkspace


def main() -> None:
    config.require_settings("NOTION_TOKEN", "SUPPORT_TICKETS_DB")
    notion = NotionWorkspace(config.NOTION_TOKEN)
    db = notion.retrieve_database(config.SUPPORT_TICKETS_DB)
    parent = db.get("parent") or {}
    print("Support Tickets Database Location:")
    print("Name:", database_title(db))
    print("Database URL:", db.get("url"))
    print("Database ID:", db.get("id"))
    print("Parent Type:", parent.get("type"))

    page_id = parent.get("page_id")
    if not page_id:
        return
    try:
        page = notion.retrieve_page(page_id)
    except REMOTE_ERRORS as e:
        print(f"Could not retrieve parent page details ({e})")
        return
    print("Parent URL:", page.get("url"))
    print("Parent Title:", page_title(page) or "(no title)")


if __name__ == "__main__":
    main()
