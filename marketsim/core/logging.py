"""
Process-wide logging setup.

Everything goes to stdout; gunicorn (see gunicorn.conf.py) and the hosting
platform collect it from there.
"""
import logging
import sys

from marketsim.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a single stdout handler to the root logger. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if any(getattr(h, "_marketsim", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._marketsim = True  # type: ignore[attr-defined]
    root.addHandler(handler)
