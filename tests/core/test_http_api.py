"""MERIT framework-agnostic HTTP handler tests (no Django)."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.commands.bus import CommandBus
from core.commands.dispatcher import CommandDispatcher
from core.events.journal import EventFactory, InMemoryEventJournal
from core.events.registry import EventTypeRegistry
from core.http_api.auth import AuthPrincipal, InMemoryAuthProvider, resolve_caller
from core.http_api.contracts import (
    GatheringCreateHttpRequest,
    GatheringJoinHttpRequest,
    GatheringReadRequest,
    HttpApiResponse,
    MeritsClaimHttpRequest,
    OwnerReadRequest,
    PartnerReadRequest,
    PartnerRegisterHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import http_status_for
from core.http_api.handlers import (
    get_gathering,
    get_merits,
    get_partner,
    get_proofs,
    get_roster,
    post_gathering_create,
    post_gathering_join,
    post_merits_claim,
    post_partner_register,
)
from core.identity.administrator import AdministratorGuard
from core.time.clock import FixedClock, ManualTimeCounter
from core.tokens.registry import InMemoryTokenRegistry
from engines.presence.services import PresenceService

ADMIN_KEY = "admin-key"
ALICE_KEY = "alice-key"
ADMIN_HEADERS = {"X-API-KEY": ADMIN_KEY}
ALICE_HEADERS = {"x-api-key": ALICE_KEY}
NOW = datetime(2026, 5, 5, 8, 0, tzinfo=timezone.utc)


def _dependencies() -> HttpApiDependencies:
    clock = FixedClock(NOW)
    journal = InMemoryEventJournal()
    registry = EventTypeRegistry()
    bus = CommandBus(
        dispatcher=CommandDispatcher(clock=clock),
        persist_event=journal,
        context=None,
        event_type_registry=registry,
    )
    service = PresenceService(
        command_bus=bus,
        event_factory=EventFactory(clock),
        persist_event=journal,
        event_type_registry=registry,
        administrator=AdministratorGuard("admin"),
        token_registry=InMemoryTokenRegistry(),
        time_counter=ManualTimeCounter(10),
        clock=clock,
    )
    return HttpApiDependencies(
        presence_service=service,
        auth_provider=InMemoryAuthProvider({
            ADMIN_KEY: AuthPrincipal(actor_id="admin"),
            ALICE_KEY: AuthPrincipal(actor_id="alice"),
        }),
    )


def _create(deps, **overrides):
    params = dict(title="Demo Day", scheduled_at=20, capacity=2, base_points=25)
    params.update(overrides)
    return post_gathering_create(GatheringCreateHttpRequest(**params), deps, headers=ADMIN_HEADERS)


class TestAuthResolution:
    def test_missing_key(self):
        rejection = resolve_caller({}, InMemoryAuthProvider())
        assert rejection.code == "AUTH_REQUIRED"

    def test_unknown_key(self):
        rejection = resolve_caller({"X-Api-Key": "nope"}, InMemoryAuthProvider())
        assert rejection.code == "AUTH_INVALID"

    def test_known_key(self):
        provider = InMemoryAuthProvider({"k": AuthPrincipal(actor_id="alice")})
        assert resolve_caller({"X-Api-Key": " k "}, provider) == "alice"

    def test_principal_validation(self):
        with pytest.raises(ValueError):
            AuthPrincipal(actor_id="")
        with pytest.raises(ValueError):
            InMemoryAuthProvider({"": AuthPrincipal(actor_id="a")})

    def test_blank_header_counts_as_missing(self):
        rejection = resolve_caller({"x-api-key": "   "}, InMemoryAuthProvider())
        assert rejection.code == "AUTH_REQUIRED"

    def test_provider_from_actor_ids(self):
        provider = InMemoryAuthProvider.from_actor_ids({"k1": "alice", "k2": "bob"})
        assert len(provider) == 2
        assert provider.resolve_api_key("k2").actor_id == "bob"
        assert provider.resolve_api_key(None) is None


class TestContracts:
    def test_join_requires_integer(self):
        with pytest.raises(ValueError, match="integer"):
            GatheringJoinHttpRequest(gathering_id="3")

    def test_claim_requires_positive(self):
        with pytest.raises(ValueError, match="> 0"):
            MeritsClaimHttpRequest(points=0)

    def test_error_response_requires_body(self):
        with pytest.raises(ValueError):
            HttpApiResponse(ok=False).to_dict()

    def test_status_mapping(self):
        assert http_status_for("UNAUTHORIZED") == 403
        assert http_status_for("CAPACITY_REACHED") == 409
        assert http_status_for("MERIT_AWARD_FAILED") == 502
        assert http_status_for("NOT_FOUND") == 404
        assert http_status_for("AUTH_REQUIRED") == 401
        assert http_status_for("SOMETHING_ELSE") == 400


class TestWriteHandlers:
    def test_full_flow(self):
        deps = _dependencies()

        registered = post_partner_register(
            PartnerRegisterHttpRequest(tag="devs", multiplier=2), deps, headers=ADMIN_HEADERS,
        )
        assert registered == {
            "ok": True,
            "data": {"status": "ACCEPTED", "caller": "admin", "tag": "devs"},
        }

        created = _create(deps, network_tags=["devs"])
        assert created["data"]["gathering_id"] == 1

        joined = post_gathering_join(
            GatheringJoinHttpRequest(gathering_id=1), deps, headers=ALICE_HEADERS,
        )
        assert joined["data"]["proof_id"] == 1

        claimed = post_merits_claim(
            MeritsClaimHttpRequest(points=30), deps, headers=ALICE_HEADERS,
        )
        assert claimed["data"]["points"] == 30

        merits = get_merits(OwnerReadRequest(owner="alice"), deps)
        assert merits["data"]["earned_points"] == 75
        assert merits["data"]["available_points"] == 45

    def test_missing_key_rejected(self):
        deps = _dependencies()
        response = post_gathering_create(
            GatheringCreateHttpRequest(title="x", scheduled_at=20, capacity=1, base_points=1),
            deps,
            headers={},
        )
        assert response["ok"] is False
        assert response["error"]["code"] == "AUTH_REQUIRED"

    def test_rejection_carries_numeric_code(self):
        deps = _dependencies()
        response = post_partner_register(
            PartnerRegisterHttpRequest(tag="devs", multiplier=2), deps, headers=ALICE_HEADERS,
        )
        assert response["ok"] is False
        assert response["error"]["code"] == "UNAUTHORIZED"
        assert response["error"]["details"]["numeric_code"] == 100
        assert response["error"]["details"]["policy_name"] == "administrator_required_policy"

    def test_invalid_params(self):
        deps = _dependencies()
        response = _create(deps, capacity=0)
        assert response["error"]["code"] == "INVALID_GATHERING_PARAMS"
        assert get_gathering(GatheringReadRequest(gathering_id=1), deps)["ok"] is False

    def test_capacity_and_duplicate(self):
        deps = _dependencies()
        _create(deps, capacity=1)
        post_gathering_join(GatheringJoinHttpRequest(gathering_id=1), deps, headers=ALICE_HEADERS)

        again = post_gathering_join(
            GatheringJoinHttpRequest(gathering_id=1), deps, headers=ALICE_HEADERS,
        )
        assert again["error"]["code"] == "CAPACITY_REACHED"

        _create(deps, capacity=5)
        post_gathering_join(GatheringJoinHttpRequest(gathering_id=2), deps, headers=ALICE_HEADERS)
        duplicate = post_gathering_join(
            GatheringJoinHttpRequest(gathering_id=2), deps, headers=ALICE_HEADERS,
        )
        assert duplicate["error"]["code"] == "DUPLICATE_REGISTRATION"


class TestReadHandlers:
    def test_reads(self):
        deps = _dependencies()
        post_partner_register(
            PartnerRegisterHttpRequest(tag="devs", multiplier=3), deps, headers=ADMIN_HEADERS,
        )
        _create(deps)
        post_gathering_join(GatheringJoinHttpRequest(gathering_id=1), deps, headers=ALICE_HEADERS)

        assert get_partner(PartnerReadRequest(tag="devs"), deps)["data"] == {
            "tag": "devs", "multiplier": 3,
        }
        gathering = get_gathering(GatheringReadRequest(gathering_id=1), deps)["data"]
        assert gathering["admitted_count"] == 1
        assert gathering["network_tags"] == []

        roster = get_roster(GatheringReadRequest(gathering_id=1), deps)["data"]
        assert roster == deps.presence_service.get_roster(1).to_dict()
        assert roster == {"gathering_id": 1, "attendees": ["alice"]}

        proofs = get_proofs(OwnerReadRequest(owner="alice"), deps)["data"]
        assert proofs == {"owner": "alice", "proof_ids": [1]}

    def test_empty_roster_for_existing_gathering(self):
        deps = _dependencies()
        _create(deps)
        roster = get_roster(GatheringReadRequest(gathering_id=1), deps)
        assert roster["data"] == {"gathering_id": 1, "attendees": []}

    def test_missing_records(self):
        deps = _dependencies()
        for response in (
            get_partner(PartnerReadRequest(tag="none"), deps),
            get_gathering(GatheringReadRequest(gathering_id=7), deps),
            get_roster(GatheringReadRequest(gathering_id=7), deps),
            get_merits(OwnerReadRequest(owner="bob"), deps),
            get_proofs(OwnerReadRequest(owner="bob"), deps),
        ):
            assert response["ok"] is False
            assert response["error"]["code"] == "NOT_FOUND"
