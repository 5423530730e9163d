"""Tests for ShareResolver access control."""

import pytest

from helpers import new_proposal
from proposely.domain.errors import NotFoundError, UpstreamError
from proposely.domain.payments import PaymentGate
from proposely.domain.proposals import PaymentStatus, ShareSlug
from proposely.domain.sharing import NOT_FOUND_MESSAGE, ShareResolver


@pytest.fixture
def resolver(store) -> ShareResolver:
    return ShareResolver(store)


def test_resolves_just_issued_slug(store, resolver):
    proposal_id = store.create(new_proposal())
    slug = PaymentGate(store, simulation_enabled=True).confirm(proposal_id)

    proposal = resolver.resolve(slug.reveal())

    assert proposal.id == proposal_id
    assert proposal.payment_status is PaymentStatus.PAID


def test_never_issued_slug_is_not_found(store, resolver):
    store.create(new_proposal())
    with pytest.raises(NotFoundError):
        resolver.resolve(ShareSlug._mint().reveal())


def test_unpaid_record_with_slug_is_not_found(store, resolver):
    """A slug planted on an unpaid row by a direct edit still grants nothing."""
    proposal_id = store.create(new_proposal())
    planted = ShareSlug.from_persisted("plantedSlug")
    store.force(proposal_id, share_slug=planted)

    with pytest.raises(NotFoundError) as unpaid_exc:
        resolver.resolve("plantedSlug")
    with pytest.raises(NotFoundError) as missing_exc:
        resolver.resolve("neverIssued")

    # Uniform response: existence of the unpaid row is not leaked
    assert unpaid_exc.value.public_message == missing_exc.value.public_message == NOT_FOUND_MESSAGE


@pytest.mark.parametrize("bad", ["", "has space", "../etc/passwd", "x" * 200])
def test_malformed_slug_rejected_without_store_call(store, resolver, bad):
    with pytest.raises(NotFoundError):
        resolver.resolve(bad)
    assert store.calls == []


def test_remint_revokes_old_slug(store, resolver):
    gate = PaymentGate(store, simulation_enabled=True)
    proposal_id = store.create(new_proposal())
    old = gate.confirm(proposal_id)
    new = gate.remint(proposal_id)

    with pytest.raises(NotFoundError):
        resolver.resolve(old.reveal())
    assert resolver.resolve(new.reveal()).id == proposal_id


def test_store_failure_is_upstream(store, resolver):
    store.fail_with = "timeout"
    with pytest.raises(UpstreamError):
        resolver.resolve("AbCdEfGhIjK")
