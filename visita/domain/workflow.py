"""Church review state machine.

Statuses move only along the edges in ``_TRANSITIONS``. Edges into APPROVED
from PENDING or NEEDS_REVISION are additionally gated on classification:
heritage-classified records reach APPROVED only from HERITAGE_REVIEW.
"""

from visita.domain.enums import ChurchStatus, HeritageClassification
from visita.domain.exceptions import InvalidTransitionException

_TRANSITIONS: dict[ChurchStatus, frozenset[ChurchStatus]] = {
    ChurchStatus.PENDING: frozenset(
        {
            ChurchStatus.NEEDS_REVISION,
            ChurchStatus.HERITAGE_REVIEW,
            ChurchStatus.APPROVED,
        }
    ),
    ChurchStatus.NEEDS_REVISION: frozenset(
        {
            ChurchStatus.PENDING,
            ChurchStatus.HERITAGE_REVIEW,
            ChurchStatus.APPROVED,
        }
    ),
    ChurchStatus.HERITAGE_REVIEW: frozenset(
        {
            ChurchStatus.APPROVED,
            ChurchStatus.NEEDS_REVISION,
        }
    ),
    ChurchStatus.APPROVED: frozenset(),
}

# Direct approval edges; closed to heritage-classified records.
_HERITAGE_GATED: frozenset[tuple[ChurchStatus, ChurchStatus]] = frozenset(
    {
        (ChurchStatus.PENDING, ChurchStatus.APPROVED),
        (ChurchStatus.NEEDS_REVISION, ChurchStatus.APPROVED),
    }
)


def is_terminal(status: ChurchStatus) -> bool:
    """Return True when no transition leaves ``status``."""
    return not _TRANSITIONS[status]


def allowed_targets(
    current: ChurchStatus, classification: HeritageClassification
) -> frozenset[ChurchStatus]:
    """Return every status reachable from ``current`` for a record of ``classification``."""
    return frozenset(
        target
        for target in _TRANSITIONS[current]
        if not (
            classification.is_heritage and (current, target) in _HERITAGE_GATED
        )
    )


def validate_transition(
    current: ChurchStatus,
    target: ChurchStatus,
    classification: HeritageClassification,
) -> None:
    """Raise InvalidTransitionException unless ``current -> target`` is allowed.

    Args:
        current: Persisted status of the record.
        target: Requested status.
        classification: Record classification (gates direct approval).
    """
    if target not in _TRANSITIONS[current]:
        raise InvalidTransitionException(
            current.value,
            target.value,
            reason="terminal_status" if is_terminal(current) else "not_in_table",
        )
    if classification.is_heritage and (current, target) in _HERITAGE_GATED:
        raise InvalidTransitionException(
            current.value,
            target.value,
            reason="heritage_review_required",
            classification=classification.value,
        )
