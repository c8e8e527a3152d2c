"""AuthorizationService: role matrix, diocese and parish scoping, audit scope."""

from dataclasses import replace

import pytest

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.church import ChurchCreate, ChurchResult
from visita.application.services.authorization_service import (
    AuditScope,
    AuthorizationService,
)
from visita.domain.enums import (
    ChurchStatus,
    Diocese,
    HeritageClassification,
    UserRole,
)
from visita.domain.exceptions import AuthorizationException

S = ChurchStatus


def _church(
    status: ChurchStatus = S.PENDING,
    diocese: Diocese = Diocese.TAGBILARAN,
    parish_id: str | None = "parish-loboc",
) -> ChurchResult:
    return ChurchResult(
        id="c1",
        name="Loboc Church",
        diocese=diocese,
        municipality="Loboc",
        classification=HeritageClassification.NON_HERITAGE,
        status=status,
        parish_id=parish_id,
    )


@pytest.fixture
def authz() -> AuthorizationService:
    return AuthorizationService()


@pytest.mark.parametrize(
    "current,target,chancery_ok,museum_ok,secretary_ok",
    [
        (S.PENDING, S.NEEDS_REVISION, True, False, False),
        (S.PENDING, S.HERITAGE_REVIEW, True, False, False),
        (S.PENDING, S.APPROVED, True, False, False),
        (S.NEEDS_REVISION, S.PENDING, False, False, True),
        (S.NEEDS_REVISION, S.HERITAGE_REVIEW, True, False, False),
        (S.NEEDS_REVISION, S.APPROVED, True, False, False),
        (S.HERITAGE_REVIEW, S.APPROVED, False, True, False),
        (S.HERITAGE_REVIEW, S.NEEDS_REVISION, False, True, False),
    ],
)
def test_role_owns_transition(
    authz: AuthorizationService,
    chancery: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
    current: ChurchStatus,
    target: ChurchStatus,
    chancery_ok: bool,
    museum_ok: bool,
    secretary_ok: bool,
) -> None:
    """Each table edge is owned by exactly the expected roles."""
    church = _church(status=current)
    assert authz.can_transition(chancery, church, target) is chancery_ok
    assert authz.can_transition(museum, church, target) is museum_ok
    assert authz.can_transition(secretary, church, target) is secretary_ok


def test_chancery_cannot_transition_other_diocese(
    authz: AuthorizationService, chancery_talibon: ActorContext
) -> None:
    church = _church(diocese=Diocese.TAGBILARAN)
    assert not authz.can_transition(chancery_talibon, church, S.APPROVED)
    with pytest.raises(AuthorizationException) as exc_info:
        authz.require_transition(chancery_talibon, church, S.APPROVED)
    assert exc_info.value.error_code == "PERMISSION_DENIED"
    assert exc_info.value.details == {"resource": "church", "action": "approved"}


def test_secretary_cannot_resubmit_other_parish(
    authz: AuthorizationService, secretary: ActorContext
) -> None:
    church = _church(status=S.NEEDS_REVISION, parish_id="parish-baclayon")
    assert not authz.can_transition(secretary, church, S.PENDING)


def test_view_scopes(
    authz: AuthorizationService,
    chancery: ActorContext,
    chancery_talibon: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
) -> None:
    own = _church()
    other_parish = _church(parish_id="parish-baclayon")
    assert authz.can_view_church(chancery, own)
    assert not authz.can_view_church(chancery_talibon, own)
    assert authz.can_view_church(museum, own)
    assert authz.can_view_church(secretary, own)
    assert not authz.can_view_church(secretary, other_parish)
    assert authz.can_view_diocese(museum, Diocese.TALIBON)
    with pytest.raises(AuthorizationException):
        authz.require_diocese_access(chancery, Diocese.TALIBON)


def test_secretary_without_parish_sees_nothing(authz: AuthorizationService) -> None:
    actor = ActorContext(
        uid="s2",
        name="No Parish",
        email="s2@example.com",
        role=UserRole.PARISH_SECRETARY,
        diocese=Diocese.TAGBILARAN,
    )
    assert not authz.can_view_church(actor, _church(parish_id=None))


def test_require_create(
    authz: AuthorizationService,
    chancery: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
) -> None:
    own_parish = ChurchCreate(
        name="Loboc Church",
        diocese=Diocese.TAGBILARAN,
        municipality="Loboc",
        classification=HeritageClassification.UNKNOWN,
        parish_id="parish-loboc",
    )
    other_parish = ChurchCreate(
        name="Baclayon Church",
        diocese=Diocese.TAGBILARAN,
        municipality="Baclayon",
        classification=HeritageClassification.UNKNOWN,
        parish_id="parish-baclayon",
    )
    authz.require_create(secretary, own_parish)
    authz.require_create(chancery, other_parish)
    with pytest.raises(AuthorizationException):
        authz.require_create(secretary, other_parish)
    with pytest.raises(AuthorizationException):
        authz.require_create(museum, own_parish)


def test_require_reclassify(
    authz: AuthorizationService,
    chancery: ActorContext,
    chancery_talibon: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
) -> None:
    church = _church()
    nct = HeritageClassification.NCT
    authz.require_reclassify(chancery, church, nct)
    authz.require_reclassify(museum, church, nct)
    for actor in (chancery_talibon, secretary):
        with pytest.raises(AuthorizationException):
            authz.require_reclassify(actor, church, nct)


def test_leaving_heritage_category_is_museum_only(
    authz: AuthorizationService,
    chancery: ActorContext,
    museum: ActorContext,
) -> None:
    church = replace(_church(), classification=HeritageClassification.ICP)
    authz.require_reclassify(chancery, church, HeritageClassification.NCT)
    authz.require_reclassify(museum, church, HeritageClassification.NON_HERITAGE)
    for target in (HeritageClassification.NON_HERITAGE, HeritageClassification.UNKNOWN):
        with pytest.raises(AuthorizationException):
            authz.require_reclassify(chancery, church, target)


def test_audit_scope(
    authz: AuthorizationService,
    chancery: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
) -> None:
    assert authz.audit_scope(museum) is AuditScope.ALL
    assert authz.audit_scope(chancery) is AuditScope.DIOCESE
    assert authz.audit_scope(secretary) is AuditScope.OWN


def test_require_audit_diocese(
    authz: AuthorizationService,
    chancery: ActorContext,
    museum: ActorContext,
    secretary: ActorContext,
) -> None:
    authz.require_audit_diocese(chancery, Diocese.TAGBILARAN)
    authz.require_audit_diocese(museum, Diocese.TALIBON)
    with pytest.raises(AuthorizationException):
        authz.require_audit_diocese(chancery, Diocese.TALIBON)
    with pytest.raises(AuthorizationException):
        authz.require_audit_diocese(secretary, Diocese.TAGBILARAN)
