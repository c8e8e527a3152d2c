"""Actor context: the authenticated caller, passed explicitly into every core call."""

from dataclasses import dataclass

from visita.domain.enums import Diocese, UserRole


@dataclass(frozen=True)
class ActorContext:
    """Identity and scope claims of the caller.

    Built by the identity adapter from a verified token plus the user's
    profile document. ``diocese`` is None for global roles; ``parish_id``
    is set for parish secretaries.
    """

    uid: str
    name: str
    email: str
    role: UserRole
    diocese: Diocese | None = None
    parish_id: str | None = None
