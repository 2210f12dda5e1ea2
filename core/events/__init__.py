"""
POS Completion Bus - Public API
=================================
Payment commits the sale. The bus only tells others about it.
"""

from core.events.dispatcher import (
    DispatchFailure,
    DispatchResult,
    dispatch_completion,
    notify_observers,
)
from core.events.errors import (
    CompletionBusError,
    DuplicateRegistrationError,
    InvalidCompletionTarget,
)
from core.events.registry import (
    CompletionRegistry,
    SaleCompletionHandler,
    SaleObserver,
)

__all__ = [
    "CompletionBusError",
    "CompletionRegistry",
    "DispatchFailure",
    "DispatchResult",
    "DuplicateRegistrationError",
    "InvalidCompletionTarget",
    "SaleCompletionHandler",
    "SaleObserver",
    "dispatch_completion",
    "notify_observers",
]
