"""
POS Core Config - Runtime Settings
====================================
Environment-driven switches for the sale engine and the logging
layout used by hosts (demo driver, terminal service).

Engine code reads these as defaults only. Every switch can be
overridden explicitly when a service is constructed.
"""

from __future__ import annotations

import logging.config
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Logging ───────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("POS_LOG_LEVEL", "INFO").upper()

# ── Receipt layout ────────────────────────────────────────────
# Column at which amounts are right-aligned on printed receipts.
RECEIPT_WIDTH = int(os.environ.get("POS_RECEIPT_WIDTH", "40"))

# ── Settlement policy ─────────────────────────────────────────
# Tendered < total due is accepted (negative change) unless enabled.
REJECT_UNDERPAYMENT = _env_bool("POS_REJECT_UNDERPAYMENT", False)

# A discount larger than the pre-discount total is kept as-is unless
# disabled, in which case it is capped at the total with VAT.
ALLOW_NEGATIVE_TOTAL = _env_bool("POS_ALLOW_NEGATIVE_TOTAL", True)


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "pos": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}


def configure_logging(level: str | None = None) -> None:
    """Install the POS logging layout. Hosts call this once at startup."""
    config = dict(LOGGING)
    if level is not None:
        config["loggers"] = {
            name: {**logger_conf, "level": level.upper()}
            for name, logger_conf in LOGGING["loggers"].items()
        }
    logging.config.dictConfig(config)
