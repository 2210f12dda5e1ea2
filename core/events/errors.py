"""
POS Completion Bus - Errors
=============================
Error types for registering completion handlers and sale observers.
Dispatch itself never raises; see core.events.dispatcher.
"""


class CompletionBusError(Exception):
    """Base error for completion registration."""
    pass


class InvalidCompletionTarget(CompletionBusError):
    """Registered object does not implement the extension point."""

    def __init__(self, extension_point: str, target: object, method: str):
        self.extension_point = extension_point
        self.target_type = type(target).__name__
        self.method = method
        super().__init__(
            f"{self.target_type} cannot be registered as {extension_point}: "
            f"missing callable '{method}'."
        )


class DuplicateRegistrationError(CompletionBusError):
    """Same object already registered on this extension point."""

    def __init__(self, extension_point: str, target_name: str):
        self.extension_point = extension_point
        self.target_name = target_name
        super().__init__(
            f"'{target_name}' already registered as {extension_point}."
        )
