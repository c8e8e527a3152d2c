"""Firestore-backed repository implementations."""

from visita.infrastructure.firebase.repositories.audit_log_repo_firestore import (
    FirestoreAuditLogRepository,
)
from visita.infrastructure.firebase.repositories.church_repo_firestore import (
    FirestoreChurchRepository,
)
from visita.infrastructure.firebase.repositories.user_profile_repo_firestore import (
    FirestoreUserProfileRepository,
)

__all__ = [
    "FirestoreAuditLogRepository",
    "FirestoreChurchRepository",
    "FirestoreUserProfileRepository",
]
