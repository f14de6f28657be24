import json
import logging
from datetime import datetime, timezone

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | int = logging.WARNING) -> None:
    root = logging.getLogger("stocksync_console")
    if any(getattr(handler, "_stocksync", False) for handler in root.handlers):
        root.setLevel(level)
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._stocksync = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)


def log_action(
    logger: logging.Logger,
    resource: str,
    action: str,
    outcome: str,
    target_id: str | None = None,
    status_code: int | None = None,
) -> None:
    logger.info(
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": "INFO",
                "resource": resource,
                "action": action,
                "target_id": target_id,
                "status_code": status_code,
                "outcome": outcome,
            }
        )
    )
