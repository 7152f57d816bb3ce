"""
MERIT Presence Engine — Application Service
==============================================
Partner registry, gathering registry, admission, merit ledger.

Every mutation is a Command routed through the CommandBus.
State-dependent policies run inside the engine, under the
service lock, immediately before the commit they guard.

Admission is all-or-nothing: the ledger write and the external
token mint share one store transaction. A refused mint restores
the snapshot taken before the write, so a credit without a proof
is never observable.
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Protocol

from core.commands.base import Command
from core.commands.bus import is_persist_accepted
from core.commands.rejection import (
    CommandRejectedError,
    ReasonCode,
    RejectionReason,
)
from core.config.limits import DEFAULT_LIMITS, LedgerLimits
from core.identity.administrator import (
    AdministratorGuard,
    administrator_required_policy,
)
from core.primitives.bounded import append_capped, append_capped_unique
from core.time.clock import Clock, SystemClock, TimeCounter
from core.tokens.registry import TokenRegistry, TokenRegistryError
from engines.presence.commands import (
    PRESENCE_COMMAND_TYPES,
    PRESENCE_GATHERING_CREATE_REQUEST,
    PRESENCE_GATHERING_JOIN_REQUEST,
    PRESENCE_MERITS_CLAIM_REQUEST,
    PRESENCE_PARTNER_REGISTER_REQUEST,
    ClaimMeritsRequest,
    CreateGatheringRequest,
    JoinGatheringRequest,
    RegisterPartnerRequest,
)
from engines.presence.errors import error_for_reason
from engines.presence.events import (
    PRESENCE_GATHERING_CREATED_V1,
    PRESENCE_GATHERING_JOINED_V1,
    PRESENCE_MERITS_CLAIMED_V1,
    PRESENCE_PARTNER_REGISTERED_V1,
    build_gathering_created_payload,
    build_gathering_joined_payload,
    build_merits_claimed_payload,
    build_partner_registered_payload,
    register_presence_event_types,
    resolve_presence_event_type,
)
from engines.presence.models import (
    Gathering,
    GatheringRoster,
    MeritAccount,
    PartnerNetwork,
    ProofRecord,
)
from engines.presence.policies import (
    caller_must_not_be_admitted_policy,
    collections_must_have_room_policy,
    gathering_must_exist_policy,
    gathering_must_have_capacity_policy,
    gathering_params_must_be_valid_policy,
    merit_account_must_exist_policy,
    multiplier_must_be_in_range_policy,
    network_tag_must_be_valid_policy,
    sufficient_merits_policy,
)

logger = logging.getLogger("merit.presence")


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════

class EventFactoryProtocol(Protocol):
    def __call__(self, *, command: Command, event_type: str, payload: dict) -> dict: ...


class PersistEventProtocol(Protocol):
    def __call__(self, *, event_data: dict, context: Any, registry: Any, **kw) -> Any: ...


# ══════════════════════════════════════════════════════════════
# PROJECTION STORE
# ══════════════════════════════════════════════════════════════

_MISSING = object()


class PresenceProjectionStore:
    """
    In-memory ledger state: five maps and two counters.

        gatherings   gathering_id → Gathering
        partners     tag          → PartnerNetwork
        merits       owner        → MeritAccount
        proofs       owner        → ProofRecord
        rosters      gathering_id → GatheringRoster

    Inside transaction() every map write records the previous value
    of its key, so rollback costs only what the block touched.
    """

    def __init__(self, limits: LedgerLimits = DEFAULT_LIMITS):
        self._limits = limits
        self._gatherings: Dict[int, Gathering] = {}
        self._partners: Dict[str, PartnerNetwork] = {}
        self._merits: Dict[str, MeritAccount] = {}
        self._proofs: Dict[str, ProofRecord] = {}
        self._rosters: Dict[int, GatheringRoster] = {}
        self._gathering_counter: int = 0
        self._proof_counter: int = 0
        self._undo: Optional[List[tuple]] = None

    def _put(self, table: dict, key: Any, value: Any) -> None:
        if self._undo is not None:
            self._undo.append((table, key, table.get(key, _MISSING)))
        table[key] = value

    # ── apply ─────────────────────────────────────────────────

    def apply(self, event_type: str, payload: dict) -> None:
        if event_type.startswith("presence.partner.registered"):
            self._put(self._partners, payload["tag"], PartnerNetwork(
                tag=payload["tag"], multiplier=payload["multiplier"],
            ))

        elif event_type.startswith("presence.gathering.created"):
            gathering_id = payload["gathering_id"]
            if gathering_id != self._gathering_counter + 1:
                raise ValueError(
                    f"gathering_id {gathering_id} is not the next id "
                    f"({self._gathering_counter + 1})."
                )
            self._put(self._gatherings, gathering_id, Gathering(
                gathering_id=gathering_id,
                title=payload["title"],
                scheduled_at=payload["scheduled_at"],
                capacity=payload["capacity"],
                base_points=payload["base_points"],
                network_tags=tuple(payload["network_tags"]),
            ))
            self._gathering_counter = gathering_id

        elif event_type.startswith("presence.gathering.joined"):
            self._apply_joined(payload)

        elif event_type.startswith("presence.merits.claimed"):
            owner = payload["owner"]
            account = self._merits[owner]
            self._put(self._merits, owner, replace(
                account, claimed_points=account.claimed_points + payload["points"],
            ))

    def _apply_joined(self, payload: dict) -> None:
        limits = self._limits
        policy = limits.overflow_policy
        owner = payload["participant"]
        gathering_id = payload["gathering_id"]
        proof_id = payload["proof_id"]
        if proof_id != self._proof_counter + 1:
            raise ValueError(
                f"proof_id {proof_id} is not the next id ({self._proof_counter + 1})."
            )

        account = self._merits.get(owner) or MeritAccount(owner=owner)
        self._put(self._merits, owner, replace(
            account,
            earned_points=account.earned_points + payload["credited_points"],
            bonus_history=append_capped_unique(
                account.bonus_history, payload["bonus"],
                limits.bonus_history_cap, policy,
            ),
        ))

        record = self._proofs.get(owner) or ProofRecord(owner=owner)
        self._put(self._proofs, owner, replace(
            record,
            proof_ids=append_capped(record.proof_ids, proof_id, limits.proofs_cap, policy),
        ))

        roster = self._rosters.get(gathering_id) or GatheringRoster(gathering_id=gathering_id)
        self._put(self._rosters, gathering_id, replace(
            roster,
            attendees=append_capped_unique(roster.attendees, owner, limits.roster_cap, policy),
        ))

        gathering = self._gatherings[gathering_id]
        self._put(self._gatherings, gathering_id, replace(
            gathering, admitted_count=gathering.admitted_count + 1,
        ))
        self._proof_counter = proof_id

    # ── transactions ──────────────────────────────────────────

    def _rollback(self, undo: List[tuple]) -> None:
        for table, key, previous in reversed(undo):
            if previous is _MISSING:
                table.pop(key, None)
            else:
                table[key] = previous

    @contextmanager
    def transaction(self):
        """Undo every map write and counter step if the block raises."""
        outer = self._undo
        counters = (self._gathering_counter, self._proof_counter)
        self._undo = []
        try:
            yield self
        except BaseException:
            self._rollback(self._undo)
            self._gathering_counter, self._proof_counter = counters
            raise
        else:
            if outer is not None:
                outer.extend(self._undo)
        finally:
            self._undo = outer

    # ── reads ─────────────────────────────────────────────────

    def get_gathering(self, gathering_id: int) -> Optional[Gathering]:
        return self._gatherings.get(gathering_id)

    def get_partner(self, tag: str) -> Optional[PartnerNetwork]:
        return self._partners.get(tag)

    def lookup_multiplier(self, tag: str) -> int:
        partner = self._partners.get(tag)
        return 0 if partner is None else partner.multiplier

    def compute_bonus(self, tags: Iterable[str]) -> int:
        """Sum of partner multipliers; unregistered tags contribute 0."""
        return sum(self.lookup_multiplier(tag) for tag in tags)

    def get_merits(self, owner: str) -> Optional[MeritAccount]:
        return self._merits.get(owner)

    def get_proofs(self, owner: str) -> Optional[ProofRecord]:
        return self._proofs.get(owner)

    def get_roster(self, gathering_id: int) -> Optional[GatheringRoster]:
        return self._rosters.get(gathering_id)

    @property
    def gathering_counter(self) -> int:
        return self._gathering_counter

    @property
    def proof_counter(self) -> int:
        return self._proof_counter

    def snapshot(self) -> dict:
        return {
            "gatherings": {k: v.to_dict() for k, v in self._gatherings.items()},
            "partners": {k: v.to_dict() for k, v in self._partners.items()},
            "merits": {k: v.to_dict() for k, v in self._merits.items()},
            "proofs": {k: v.to_dict() for k, v in self._proofs.items()},
            "rosters": {k: v.to_dict() for k, v in self._rosters.items()},
            "gathering_counter": self._gathering_counter,
            "proof_counter": self._proof_counter,
        }


# ══════════════════════════════════════════════════════════════
# EXECUTION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PresenceExecutionResult:
    event_type: str
    event_data: dict
    persist_result: Any
    projection_applied: bool
    value: Any


# ══════════════════════════════════════════════════════════════
# COMMAND HANDLER
# ══════════════════════════════════════════════════════════════

class _PresenceCommandHandler:
    def __init__(self, service: "PresenceService"):
        self._service = service

    def execute(self, command: Command) -> PresenceExecutionResult:
        return self._service._execute_command(command)


def _reject(reason: Optional[RejectionReason]) -> None:
    if reason is not None:
        raise CommandRejectedError(reason)


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class PresenceService:
    """Presence engine application service."""

    def __init__(
        self,
        *,
        command_bus,
        event_factory: EventFactoryProtocol,
        persist_event: PersistEventProtocol,
        event_type_registry,
        administrator: AdministratorGuard,
        token_registry: TokenRegistry,
        time_counter: TimeCounter,
        limits: LedgerLimits = DEFAULT_LIMITS,
        projection_store: PresenceProjectionStore | None = None,
        clock: Clock | None = None,
    ):
        self._command_bus = command_bus
        self._event_factory = event_factory
        self._persist_event = persist_event
        self._event_type_registry = event_type_registry
        self._administrator = administrator
        self._token_registry = token_registry
        self._time_counter = time_counter
        self._limits = limits
        self._projection_store = projection_store or PresenceProjectionStore(limits)
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()

        register_presence_event_types(self._event_type_registry)
        handler = _PresenceCommandHandler(self)
        for command_type in sorted(PRESENCE_COMMAND_TYPES):
            self._command_bus.register_handler(command_type, handler)

    # ══════════════════════════════════════════════════════════
    # PUBLIC OPERATIONS
    # ══════════════════════════════════════════════════════════

    def register_partner(self, *, caller: str, tag: Any, multiplier: Any) -> str:
        """Upsert a partner network. Returns the tag."""
        return self._submit(caller, RegisterPartnerRequest(tag=tag, multiplier=multiplier))

    def create_gathering(
        self,
        *,
        caller: str,
        title: Any,
        scheduled_at: Any,
        capacity: Any,
        base_points: Any,
        network_tags=(),
    ) -> int:
        """Create a gathering. Returns the new gathering id."""
        return self._submit(caller, CreateGatheringRequest(
            title=title,
            scheduled_at=scheduled_at,
            capacity=capacity,
            base_points=base_points,
            network_tags=network_tags,
        ))

    def join_gathering(self, *, caller: str, gathering_id: int) -> int:
        """Admit the caller. Returns the new proof id."""
        return self._submit(caller, JoinGatheringRequest(gathering_id=gathering_id))

    def claim_merits(self, *, caller: str, points: int) -> int:
        """Claim points from the caller's balance. Returns the claimed amount."""
        return self._submit(caller, ClaimMeritsRequest(points=points))

    def _submit(self, caller: str, request) -> Any:
        command = request.to_command(
            actor_id=caller,
            command_id=uuid.uuid4(),
            correlation_id=uuid.uuid4(),
            issued_at=self._clock.now_utc(),
        )
        result = self._command_bus.handle(command)
        if result.is_rejected:
            raise error_for_reason(result.reason)
        return result.execution_result.value

    # ══════════════════════════════════════════════════════════
    # READS (pure)
    # ══════════════════════════════════════════════════════════

    def get_gathering(self, gathering_id: int) -> Optional[Gathering]:
        with self._lock:
            return self._projection_store.get_gathering(gathering_id)

    def get_partner(self, tag: str) -> Optional[PartnerNetwork]:
        with self._lock:
            return self._projection_store.get_partner(tag)

    def lookup_multiplier(self, tag: str) -> int:
        with self._lock:
            return self._projection_store.lookup_multiplier(tag)

    def get_proofs(self, owner: str) -> Optional[ProofRecord]:
        with self._lock:
            return self._projection_store.get_proofs(owner)

    def get_merits(self, owner: str) -> Optional[MeritAccount]:
        with self._lock:
            return self._projection_store.get_merits(owner)

    def get_available_merits(self, owner: str) -> int:
        account = self.get_merits(owner)
        return 0 if account is None else account.available_points

    def get_roster(self, gathering_id: int) -> Optional[GatheringRoster]:
        with self._lock:
            return self._projection_store.get_roster(gathering_id)

    @property
    def administrator_id(self) -> str:
        return self._administrator.administrator_id

    @property
    def limits(self) -> LedgerLimits:
        return self._limits

    @property
    def projection_store(self) -> PresenceProjectionStore:
        return self._projection_store

    # ══════════════════════════════════════════════════════════
    # EXECUTION
    # ══════════════════════════════════════════════════════════

    def _execute_command(self, command: Command) -> PresenceExecutionResult:
        event_type = resolve_presence_event_type(command.command_type)
        if event_type is None:
            raise ValueError(f"Unsupported presence command type: {command.command_type}")
        self._event_type_registry.require(event_type)

        steps = {
            PRESENCE_PARTNER_REGISTER_REQUEST: self._register_partner,
            PRESENCE_GATHERING_CREATE_REQUEST: self._create_gathering,
            PRESENCE_GATHERING_JOIN_REQUEST: self._join_gathering,
            PRESENCE_MERITS_CLAIM_REQUEST: self._claim_merits,
        }

        # Journal order must follow commit order, so both happen under the lock.
        with self._lock:
            payload, value = steps[command.command_type](command)
            event_data = self._event_factory(
                command=command,
                event_type=event_type,
                payload=payload,
            )
            persist_result = self._persist_event(
                event_data=event_data,
                context=None,
                registry=self._event_type_registry,
            )

        if not is_persist_accepted(persist_result):
            logger.warning(
                f"Committed {event_type} for command {command.command_id} "
                f"was not journaled: {persist_result}"
            )

        return PresenceExecutionResult(
            event_type=event_type,
            event_data=event_data,
            persist_result=persist_result,
            projection_applied=True,
            value=value,
        )

    def _register_partner(self, command: Command):
        _reject(administrator_required_policy(command, self._administrator))
        _reject(network_tag_must_be_valid_policy(command, self._limits))
        _reject(multiplier_must_be_in_range_policy(command, self._limits))

        payload = build_partner_registered_payload(command)
        with self._projection_store.transaction() as store:
            store.apply(PRESENCE_PARTNER_REGISTERED_V1, payload)

        logger.info(f"Partner '{payload['tag']}' registered with multiplier {payload['multiplier']}")
        return payload, payload["tag"]

    def _create_gathering(self, command: Command):
        _reject(administrator_required_policy(command, self._administrator))
        _reject(gathering_params_must_be_valid_policy(
            command, self._limits, self._time_counter.current(),
        ))

        network_tags: tuple = ()
        for tag in command.payload.get("network_tags", ()):
            network_tags = append_capped_unique(
                network_tags, tag, self._limits.max_network_tags,
            )

        gathering_id = self._projection_store.gathering_counter + 1
        payload = build_gathering_created_payload(
            command, gathering_id=gathering_id, network_tags=network_tags,
        )
        with self._projection_store.transaction() as store:
            store.apply(PRESENCE_GATHERING_CREATED_V1, payload)

        logger.info(f"Gathering {gathering_id} created: {payload['title']!r}")
        return payload, gathering_id

    def _join_gathering(self, command: Command):
        store = self._projection_store
        caller = command.actor_id

        _reject(gathering_must_exist_policy(command, store.get_gathering))
        _reject(gathering_must_have_capacity_policy(command, store.get_gathering))
        _reject(caller_must_not_be_admitted_policy(command, store.get_roster))

        gathering = store.get_gathering(command.payload["gathering_id"])
        bonus = store.compute_bonus(gathering.network_tags)
        credited_points = gathering.base_points * (1 + bonus)

        _reject(collections_must_have_room_policy(
            command,
            bonus=bonus,
            merits_lookup=store.get_merits,
            proofs_lookup=store.get_proofs,
            limits=self._limits,
        ))

        proof_id = store.proof_counter + 1
        payload = build_gathering_joined_payload(
            command,
            proof_id=proof_id,
            base_points=gathering.base_points,
            bonus=bonus,
            credited_points=credited_points,
        )
        with store.transaction():
            store.apply(PRESENCE_GATHERING_JOINED_V1, payload)
            self._mint_proof(proof_id, caller)

        logger.info(
            f"'{caller}' admitted to gathering {gathering.gathering_id}: "
            f"proof {proof_id}, {credited_points} points (bonus {bonus})"
        )
        return payload, proof_id

    def _mint_proof(self, proof_id: int, owner: str) -> None:
        try:
            minted = self._token_registry.mint(proof_id, owner)
        except TokenRegistryError as exc:
            logger.warning(f"Token registry error minting proof {proof_id}: {exc}")
            minted = False

        if not minted:
            raise CommandRejectedError(RejectionReason(
                code=ReasonCode.MERIT_AWARD_FAILED,
                message=f"Proof token {proof_id} could not be minted to '{owner}'.",
                policy_name="proof_token_must_mint",
            ))

    def _claim_merits(self, command: Command):
        points = command.payload.get("points")
        if not isinstance(points, int) or isinstance(points, bool) or points <= 0:
            raise ValueError("points must be an integer > 0.")

        store = self._projection_store
        _reject(merit_account_must_exist_policy(command, store.get_merits))
        _reject(sufficient_merits_policy(command, store.get_merits))

        payload = build_merits_claimed_payload(command)
        with store.transaction():
            store.apply(PRESENCE_MERITS_CLAIMED_V1, payload)

        logger.info(f"'{command.actor_id}' claimed {points} points")
        return payload, points
