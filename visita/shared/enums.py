"""Shared enumerations for the VISITA review service.

Cross-cutting enums used by application and infrastructure (audit actions,
resource types). Domain-specific enums (e.g. ChurchStatus) live in
visita.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ResourceType(_ValuesMixin, str, Enum):
    """Category of resource an audit entry refers to."""

    USER = "user"
    CHURCH = "church"
    ANNOUNCEMENT = "announcement"
    FEEDBACK = "feedback"
    HERITAGE = "heritage"
    SYSTEM = "system"


class AuditAction(_ValuesMixin, str, Enum):
    """Closed set of privileged actions recorded in the audit log."""

    # Authentication
    AUTH_LOGIN = "auth.login"
    AUTH_LOGOUT = "auth.logout"

    # Church records
    CHURCH_CREATE = "church.create"
    CHURCH_UPDATE = "church.update"
    CHURCH_SUBMIT = "church.submit"
    CHURCH_APPROVE = "church.approve"
    CHURCH_REQUEST_REVISION = "church.request_revision"
    CHURCH_FORWARD_HERITAGE = "church.forward_heritage"

    # Heritage validation
    HERITAGE_RECLASSIFY = "heritage.reclassify"

    # User accounts
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DEACTIVATE = "user.deactivate"
    USER_REACTIVATE = "user.reactivate"
    USER_BLOCK = "user.block"

    # Announcements and feedback moderation
    ANNOUNCEMENT_CREATE = "announcement.create"
    ANNOUNCEMENT_ARCHIVE = "announcement.archive"
    FEEDBACK_HIDE = "feedback.hide"
    FEEDBACK_RESPOND = "feedback.respond"

    SYSTEM_CONFIG_UPDATE = "system.config_update"
