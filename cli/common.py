import logging
from services.errors import is_unauthorized

log = logging.getLogger(__name__)


def report_failure(e: Exception, hint: str = "") -> int:
    # Top-level handler shared by the front ends: say what broke, exit non-zero.
    log.debug("Remote call failed", exc_info=e)
    print(f"Error: {e}")
    if hint and is_unauthorized(e):
        print(hint)
    return 1
