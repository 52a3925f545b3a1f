"""Logging setup for loan-ledger.

Engine modules log through ``logging.getLogger(__name__)``. Commit and
status messages carry the loan they concern so JSON logs can be filtered
per loan or customer.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

# Record attributes copied into JSON output when present
CONTEXT_FIELDS = ("loan_id", "payment_id", "customer_id")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure the root logger and the ``loan_ledger`` hierarchy.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated text, ``"json"`` for one JSON
        object per line.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format_type == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("loan_ledger").setLevel(log_level)
    # Faker logs every locale/provider lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with loan context fields when set."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload)


class LoanLogAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with a loan's ids.

    Per-call ``extra`` values (for example ``payment_id``) are merged over
    the adapter's own context instead of replacing it.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def loan_logger(logger: logging.Logger, loan_id: str, customer_id: str | None = None) -> LoanLogAdapter:
    """Wrap ``logger`` so its records carry ``loan_id`` and ``customer_id``."""
    return LoanLogAdapter(logger, {"loan_id": loan_id, "customer_id": customer_id})


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)
