"""Church review state machine: transition table and heritage gate."""

import itertools

import pytest

from visita.domain.enums import ChurchStatus, HeritageClassification
from visita.domain.exceptions import InvalidTransitionException
from visita.domain.workflow import allowed_targets, is_terminal, validate_transition

S = ChurchStatus
C = HeritageClassification

ALLOWED = {
    (S.PENDING, S.NEEDS_REVISION),
    (S.PENDING, S.HERITAGE_REVIEW),
    (S.PENDING, S.APPROVED),
    (S.NEEDS_REVISION, S.PENDING),
    (S.NEEDS_REVISION, S.HERITAGE_REVIEW),
    (S.NEEDS_REVISION, S.APPROVED),
    (S.HERITAGE_REVIEW, S.APPROVED),
    (S.HERITAGE_REVIEW, S.NEEDS_REVISION),
}


@pytest.mark.parametrize("current,target", list(itertools.product(S, S)))
def test_every_pair_for_non_heritage_record(current: S, target: S) -> None:
    """Non-heritage records follow the table exactly; all other pairs are rejected."""
    if (current, target) in ALLOWED:
        validate_transition(current, target, C.NON_HERITAGE)
    else:
        with pytest.raises(InvalidTransitionException) as exc_info:
            validate_transition(current, target, C.NON_HERITAGE)
        assert exc_info.value.error_code == "INVALID_TRANSITION"
        assert exc_info.value.details["current_status"] == current.value
        assert exc_info.value.details["target_status"] == target.value


@pytest.mark.parametrize("classification", [C.NCT, C.ICP])
@pytest.mark.parametrize("current", [S.PENDING, S.NEEDS_REVISION])
def test_heritage_record_cannot_be_approved_directly(classification: C, current: S) -> None:
    """NCT/ICP records reach approved only through heritage review."""
    with pytest.raises(InvalidTransitionException) as exc_info:
        validate_transition(current, S.APPROVED, classification)
    assert exc_info.value.details["reason"] == "heritage_review_required"
    assert exc_info.value.details["classification"] == classification.value
    assert "heritage review" in exc_info.value.message


@pytest.mark.parametrize("classification", [C.NCT, C.ICP])
def test_heritage_record_approved_from_heritage_review(classification: C) -> None:
    validate_transition(S.HERITAGE_REVIEW, S.APPROVED, classification)


def test_unknown_classification_is_not_gated() -> None:
    """Only NCT and ICP are heritage categories."""
    validate_transition(S.PENDING, S.APPROVED, C.UNKNOWN)


def test_approved_is_terminal() -> None:
    assert is_terminal(S.APPROVED)
    assert not any(is_terminal(s) for s in (S.PENDING, S.NEEDS_REVISION, S.HERITAGE_REVIEW))
    with pytest.raises(InvalidTransitionException) as exc_info:
        validate_transition(S.APPROVED, S.PENDING, C.NON_HERITAGE)
    assert exc_info.value.details["reason"] == "terminal_status"


def test_self_transition_is_rejected() -> None:
    with pytest.raises(InvalidTransitionException) as exc_info:
        validate_transition(S.PENDING, S.PENDING, C.NON_HERITAGE)
    assert exc_info.value.details["reason"] == "not_in_table"


def test_allowed_targets_respects_heritage_gate() -> None:
    assert allowed_targets(S.PENDING, C.NON_HERITAGE) == {
        S.NEEDS_REVISION,
        S.HERITAGE_REVIEW,
        S.APPROVED,
    }
    assert allowed_targets(S.PENDING, C.NCT) == {S.NEEDS_REVISION, S.HERITAGE_REVIEW}
    assert allowed_targets(S.NEEDS_REVISION, C.ICP) == {S.PENDING, S.HERITAGE_REVIEW}
    assert allowed_targets(S.APPROVED, C.NCT) == frozenset()
