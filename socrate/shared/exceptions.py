"""
Exception hierarchy for Socrate.
"""


class SocrateError(Exception):
    """Base exception for all Socrate errors."""
    pass


class GatewayError(SocrateError):
    """Raised when the model gateway call fails (network, non-2xx status)."""
    pass


class VendorError(GatewayError):
    """Raised when the proxy cannot reach or authenticate with a vendor."""
    pass


class SessionError(SocrateError):
    """Raised when session operation fails."""
    pass


class SessionNotFoundError(SessionError):
    """Raised when a session id is unknown or has expired."""
    pass


class ControllerBusyError(SessionError):
    """Raised when a gateway call is already outstanding for a controller."""
    pass


class InsightPendingError(SessionError):
    """Raised when the dialogue is waiting for the user's insight text."""
    pass


class ProblemNotFoundError(SessionError):
    """Raised when a problem id does not exist in the session."""
    pass


class ClipboardError(SocrateError):
    """Raised when the system clipboard cannot be written."""
    pass


class UnsupportedModelError(VendorError):
    """Raised when no vendor serves the requested model name."""
    pass
