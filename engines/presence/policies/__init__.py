"""
MERIT Presence Engine — Policies
===================================
Validation, capacity, duplicate and balance guards.

Every policy returns None when it passes and a RejectionReason
when it rejects. Policies read state only through injected
lookups; none of them writes anything.
"""

from __future__ import annotations

from typing import Any, Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.limits import LedgerLimits
from core.primitives.bounded import OverflowPolicy, would_overflow


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(value: Any, low: int, high: int) -> bool:
    return _is_int(value) and low <= value <= high


def _invalid_params(message: str) -> RejectionReason:
    return RejectionReason(
        code=ReasonCode.INVALID_GATHERING_PARAMS,
        message=message,
        policy_name="gathering_params_must_be_valid_policy",
    )


# ══════════════════════════════════════════════════════════════
# PARTNER NETWORK REGISTRY
# ══════════════════════════════════════════════════════════════

def network_tag_must_be_valid_policy(
    command: Command,
    limits: LedgerLimits,
) -> Optional[RejectionReason]:
    """Partner tag must be a string within the tag length bounds."""
    tag = command.payload.get("tag")
    if isinstance(tag, str) and limits.tag_min_length <= len(tag) <= limits.tag_max_length:
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_NETWORK_TAG,
        message=(
            f"Network tag must be {limits.tag_min_length}-"
            f"{limits.tag_max_length} characters, got {tag!r}."
        ),
        policy_name="network_tag_must_be_valid_policy",
    )


def multiplier_must_be_in_range_policy(
    command: Command,
    limits: LedgerLimits,
) -> Optional[RejectionReason]:
    multiplier = command.payload.get("multiplier")
    if _in_range(multiplier, limits.multiplier_min, limits.multiplier_max):
        return None
    return RejectionReason(
        code=ReasonCode.INVALID_GATHERING_PARAMS,
        message=(
            f"Multiplier must be an integer in [{limits.multiplier_min}, "
            f"{limits.multiplier_max}], got {multiplier!r}."
        ),
        policy_name="multiplier_must_be_in_range_policy",
    )


# ══════════════════════════════════════════════════════════════
# GATHERING REGISTRY
# ══════════════════════════════════════════════════════════════

def gathering_params_must_be_valid_policy(
    command: Command,
    limits: LedgerLimits,
    current_time: int,
) -> Optional[RejectionReason]:
    """
    Validate a gathering definition. Checks run in a fixed order:
    title, network tags, schedule, capacity, base points.
    """
    p = command.payload

    title = p.get("title")
    if not (
        isinstance(title, str)
        and limits.title_min_length <= len(title) <= limits.title_max_length
    ):
        return _invalid_params(
            f"title must be {limits.title_min_length}-{limits.title_max_length} characters."
        )

    tags = p.get("network_tags", [])
    if not isinstance(tags, (list, tuple)):
        return _invalid_params("network_tags must be a list of strings.")
    if len(tags) > limits.max_network_tags:
        return _invalid_params(
            f"At most {limits.max_network_tags} network tags allowed, got {len(tags)}."
        )
    for tag in tags:
        if not isinstance(tag, str) or len(tag) > limits.tag_max_length:
            return _invalid_params(
                f"Network tags must be strings of at most {limits.tag_max_length} characters."
            )

    scheduled_at = p.get("scheduled_at")
    if not _is_int(scheduled_at) or scheduled_at <= current_time:
        return _invalid_params(
            f"scheduled_at must be later than the current time ({current_time})."
        )

    if not _in_range(p.get("capacity"), limits.capacity_min, limits.capacity_max):
        return _invalid_params(
            f"capacity must be in [{limits.capacity_min}, {limits.capacity_max}]."
        )

    if not _in_range(p.get("base_points"), limits.base_points_min, limits.base_points_max):
        return _invalid_params(
            f"base_points must be in [{limits.base_points_min}, {limits.base_points_max}]."
        )

    return None


# ══════════════════════════════════════════════════════════════
# ADMISSION
# ══════════════════════════════════════════════════════════════

def gathering_must_exist_policy(
    command: Command,
    gathering_lookup,
) -> Optional[RejectionReason]:
    gathering_id = command.payload.get("gathering_id")
    if gathering_lookup(gathering_id) is not None:
        return None
    return RejectionReason(
        code=ReasonCode.NOT_FOUND,
        message=f"Gathering {gathering_id!r} not found.",
        policy_name="gathering_must_exist_policy",
    )


def gathering_must_have_capacity_policy(
    command: Command,
    gathering_lookup,
) -> Optional[RejectionReason]:
    gathering = gathering_lookup(command.payload.get("gathering_id"))
    if gathering is None or not gathering.is_full:
        return None
    return RejectionReason(
        code=ReasonCode.CAPACITY_REACHED,
        message=(
            f"Gathering {gathering.gathering_id} is full "
            f"({gathering.admitted_count}/{gathering.capacity})."
        ),
        policy_name="gathering_must_have_capacity_policy",
    )


def caller_must_not_be_admitted_policy(
    command: Command,
    roster_lookup,
) -> Optional[RejectionReason]:
    """An identity is admitted to a gathering at most once."""
    gathering_id = command.payload.get("gathering_id")
    roster = roster_lookup(gathering_id)
    if roster is None or not roster.has_attendee(command.actor_id):
        return None
    return RejectionReason(
        code=ReasonCode.DUPLICATE_REGISTRATION,
        message=f"'{command.actor_id}' is already admitted to gathering {gathering_id}.",
        policy_name="caller_must_not_be_admitted_policy",
    )


def collections_must_have_room_policy(
    command: Command,
    *,
    bonus: int,
    merits_lookup,
    proofs_lookup,
    limits: LedgerLimits,
) -> Optional[RejectionReason]:
    """
    Under a REJECT overflow policy, an admission that would overflow
    the caller's bonus history or proof record is refused up front.
    Under DROP this policy never rejects.
    """
    if limits.overflow_policy != OverflowPolicy.REJECT:
        return None

    account = merits_lookup(command.actor_id)
    history = account.bonus_history if account is not None else ()
    record = proofs_lookup(command.actor_id)
    proof_ids = record.proof_ids if record is not None else ()

    if would_overflow(history, bonus, limits.bonus_history_cap, unique=True):
        full = "bonus history"
    elif would_overflow(proof_ids, None, limits.proofs_cap, unique=False):
        full = "proof record"
    else:
        return None

    return RejectionReason(
        code=ReasonCode.COLLECTION_LIMIT_REACHED,
        message=f"'{command.actor_id}' {full} is full.",
        policy_name="collections_must_have_room_policy",
    )


# ══════════════════════════════════════════════════════════════
# MERIT LEDGER
# ══════════════════════════════════════════════════════════════

def merit_account_must_exist_policy(
    command: Command,
    merits_lookup,
) -> Optional[RejectionReason]:
    if merits_lookup(command.actor_id) is not None:
        return None
    return RejectionReason(
        code=ReasonCode.NOT_FOUND,
        message=f"No merit account for '{command.actor_id}'.",
        policy_name="merit_account_must_exist_policy",
    )


def sufficient_merits_policy(
    command: Command,
    merits_lookup,
) -> Optional[RejectionReason]:
    """Caller must have at least the requested points available."""
    account = merits_lookup(command.actor_id)
    if account is None:
        return None
    points = command.payload.get("points", 0)
    if account.available_points >= points:
        return None
    return RejectionReason(
        code=ReasonCode.INSUFFICIENT_MERITS,
        message=f"'{command.actor_id}' has {account.available_points} points available, needs {points}.",
        policy_name="sufficient_merits_policy",
    )
