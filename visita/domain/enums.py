"""Domain enumerations for church records and the people who review them."""

from enum import Enum


class Diocese(str, Enum):
    """Administrative scoping unit. Records and reviewers belong to exactly one."""

    TAGBILARAN = "tagbilaran"
    TALIBON = "talibon"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid diocese values as strings."""
        return [d.value for d in cls]


class ChurchStatus(str, Enum):
    """Review status of a church record. Exactly one value at any time.

    Initial state is PENDING; APPROVED is terminal.
    """

    PENDING = "pending"
    NEEDS_REVISION = "needs_revision"
    HERITAGE_REVIEW = "heritage_review"
    APPROVED = "approved"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [s.value for s in cls]


class HeritageClassification(str, Enum):
    """Heritage-sensitivity category of a church.

    NCT (National Cultural Treasure) and ICP (Important Cultural Property)
    are the two heritage-protected categories; they must pass heritage
    review before approval.
    """

    NCT = "NCT"
    ICP = "ICP"
    NON_HERITAGE = "non_heritage"
    UNKNOWN = "unknown"

    @property
    def is_heritage(self) -> bool:
        """True for heritage-protected categories."""
        return self in (HeritageClassification.NCT, HeritageClassification.ICP)

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid classification values as strings."""
        return [c.value for c in cls]


class UserRole(str, Enum):
    """Role claim of an authenticated actor."""

    CHANCERY_OFFICE = "chancery_office"
    MUSEUM_RESEARCHER = "museum_researcher"
    PARISH_SECRETARY = "parish_secretary"

    @property
    def is_global(self) -> bool:
        """True for roles that are not limited to a single diocese."""
        return self is UserRole.MUSEUM_RESEARCHER
