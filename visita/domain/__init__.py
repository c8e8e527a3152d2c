"""Domain layer: enums, exceptions, and the church review state machine.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from visita.domain.enums import (
    ChurchStatus,
    Diocese,
    HeritageClassification,
    UserRole,
)
from visita.domain.exceptions import (
    AuditWriteFailedException,
    AuthenticationException,
    AuthorizationException,
    BackendUnavailableException,
    InvalidTransitionException,
    ResourceNotFoundException,
    ValidationException,
    VisitaException,
)
from visita.domain.workflow import allowed_targets, is_terminal, validate_transition

__all__ = [
    # Enums
    "ChurchStatus",
    "Diocese",
    "HeritageClassification",
    "UserRole",
    # Exceptions
    "AuditWriteFailedException",
    "AuthenticationException",
    "AuthorizationException",
    "BackendUnavailableException",
    "InvalidTransitionException",
    "ResourceNotFoundException",
    "ValidationException",
    "VisitaException",
    # State machine
    "allowed_targets",
    "is_terminal",
    "validate_transition",
]
