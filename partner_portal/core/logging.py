import logging
import sys

from partner_portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # uvicorn installs its own handlers; keep access logs at INFO at most.
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
