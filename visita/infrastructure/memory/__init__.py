"""Process-local repositories with the same contracts as the Firestore ones.

Selected with DATABASE_BACKEND=memory for local runs and tests. State lives
for the lifetime of the process only.
"""

from visita.infrastructure.memory.repositories import (
    InMemoryAuditLogRepository,
    InMemoryChurchRepository,
    InMemoryStore,
    InMemoryUserProfileRepository,
)

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryChurchRepository",
    "InMemoryStore",
    "InMemoryUserProfileRepository",
]
