"""
POS Command Layer - Rejections
================================
Every refused sale operation carries a structured reason.
"""

from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "RejectionReason",
    "ReasonCode",
]
