"""Application-level exception types for EVA."""

from __future__ import annotations


class EvaError(Exception):
    """Base exception for EVA."""


class ConfigurationError(EvaError):
    """Raised when settings cannot be loaded or fail validation."""


class CompositionError(EvaError):
    """Raised when a reply could not be built for a user message."""


class SessionBusyError(EvaError):
    """Raised by strict submissions while another message is still being processed."""
