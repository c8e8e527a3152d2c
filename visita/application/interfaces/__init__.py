"""Application ports (Protocols) implemented by infrastructure."""

from visita.application.interfaces.repositories import (
    IAuditLogRepository,
    IChurchRepository,
    IUserProfileRepository,
)
from visita.application.interfaces.services import ITokenVerifier

__all__ = [
    "IAuditLogRepository",
    "IChurchRepository",
    "ITokenVerifier",
    "IUserProfileRepository",
]
