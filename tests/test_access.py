"""Ownership decision table — every role × resource pair, no HTTP.

``decide_access`` works on rows that were already loaded, so transient
ORM instances are enough here.
"""

from __future__ import annotations

import pytest

from shift_manager.auth.access import AccessContext, AccessDecision, decide_access
from shift_manager.auth.models import User
from shift_manager.common.constants import Resource, UserRole
from shift_manager.customers.models import Customer
from shift_manager.documents.models import Document
from shift_manager.invoices.models import Invoice
from shift_manager.shifts.models import Shift
from shift_manager.workplaces.models import Workplace

COMPANY_ID = 10
OTHER_COMPANY_ID = 20
WORKER_ID = 30


def _workplace(**kwargs) -> Workplace:
    return Workplace(id=kwargs.pop("id", 1), name="Club", type="club", **kwargs)


# ── Admin / missing rows ────────────────────────────────────────────


@pytest.mark.parametrize("resource", list(Resource))
def test_admin_always_allowed(resource):
    """Admin passes even before the row is looked at."""
    decision = decide_access(resource, UserRole.admin, 1, AccessContext(entity=None))
    assert decision == AccessDecision.allow


@pytest.mark.parametrize("role", [UserRole.company, UserRole.worker])
def test_missing_entity_is_not_found(role):
    decision = decide_access(Resource.shift, role, 5, AccessContext(entity=None))
    assert decision == AccessDecision.not_found


# ── Workplaces ──────────────────────────────────────────────────────


def test_company_owner_and_manager_allowed():
    owned = _workplace(owner_id=COMPANY_ID)
    managed = _workplace(manager_id=COMPANY_ID)
    foreign = _workplace(owner_id=OTHER_COMPANY_ID)

    ctx = AccessContext
    assert decide_access(Resource.workplace, UserRole.company, COMPANY_ID, ctx(entity=owned)) == AccessDecision.allow
    assert decide_access(Resource.workplace, UserRole.company, COMPANY_ID, ctx(entity=managed)) == AccessDecision.allow
    assert decide_access(Resource.workplace, UserRole.company, COMPANY_ID, ctx(entity=foreign)) == AccessDecision.forbid


def test_worker_sees_workplace_only_with_a_shift_there():
    workplace = _workplace(id=7, owner_id=COMPANY_ID)
    with_shift = AccessContext(entity=workplace, worker_workplace_ids=frozenset({7}))
    without = AccessContext(entity=workplace, worker_workplace_ids=frozenset({8}))

    assert decide_access(Resource.workplace, UserRole.worker, WORKER_ID, with_shift) == AccessDecision.allow
    assert decide_access(Resource.workplace, UserRole.worker, WORKER_ID, without) == AccessDecision.forbid


# ── Shifts ──────────────────────────────────────────────────────────


def test_worker_only_own_shift():
    own = Shift(id=1, workplace_id=1, user_id=WORKER_ID)
    other = Shift(id=2, workplace_id=1, user_id=WORKER_ID + 1)

    assert decide_access(Resource.shift, UserRole.worker, WORKER_ID, AccessContext(entity=own)) == AccessDecision.allow
    assert decide_access(Resource.shift, UserRole.worker, WORKER_ID, AccessContext(entity=other)) == AccessDecision.forbid


def test_company_shift_via_workplace_or_employee():
    shift = Shift(id=1, workplace_id=1, user_id=WORKER_ID)
    employee = User(id=WORKER_ID, parent_company_id=COMPANY_ID)
    stranger = User(id=WORKER_ID, parent_company_id=OTHER_COMPANY_ID)

    via_workplace = AccessContext(entity=shift, workplace=_workplace(manager_id=COMPANY_ID), shift_user=stranger)
    via_employee = AccessContext(entity=shift, workplace=_workplace(owner_id=OTHER_COMPANY_ID), shift_user=employee)
    neither = AccessContext(entity=shift, workplace=_workplace(owner_id=OTHER_COMPANY_ID), shift_user=stranger)

    assert decide_access(Resource.shift, UserRole.company, COMPANY_ID, via_workplace) == AccessDecision.allow
    assert decide_access(Resource.shift, UserRole.company, COMPANY_ID, via_employee) == AccessDecision.allow
    assert decide_access(Resource.shift, UserRole.company, COMPANY_ID, neither) == AccessDecision.forbid


# ── Owned records (customers, invoices, documents) ──────────────────


@pytest.mark.parametrize(
    "resource, entity",
    [
        (Resource.customer, Customer(id=1, name="A", address="B", user_id=COMPANY_ID)),
        (Resource.invoice, Invoice(id=1, invoice_number="2025001", user_id=COMPANY_ID)),
        (Resource.document, Document(id=1, name="scan", type="pdf", size="1 KB", path="x", user_id=COMPANY_ID)),
    ],
)
def test_owned_records(resource, entity):
    ctx = AccessContext(entity=entity)
    assert decide_access(resource, UserRole.company, COMPANY_ID, ctx) == AccessDecision.allow
    assert decide_access(resource, UserRole.company, OTHER_COMPANY_ID, ctx) == AccessDecision.forbid
    # Workers never reach owned records, even their own id
    assert decide_access(resource, UserRole.worker, COMPANY_ID, ctx) == AccessDecision.forbid
