"""
MERIT HTTP API - Framework-Agnostic Handlers
============================================
Pure handler functions over contracts and injected dependencies.

Writes resolve the caller from headers, then call the presence
service facade. Reads need no caller.
"""

from __future__ import annotations

import logging
from typing import Any

from core.commands.rejection import ReasonCode, RejectionReason
from core.http_api.auth.resolver import resolve_caller
from core.http_api.contracts import (
    GatheringCreateHttpRequest,
    GatheringJoinHttpRequest,
    GatheringReadRequest,
    MeritsClaimHttpRequest,
    OwnerReadRequest,
    PartnerReadRequest,
    PartnerRegisterHttpRequest,
)
from core.http_api.errors import (
    HANDLER_EXECUTION_FAILED,
    INVALID_REQUEST,
    error_response,
    rejection_response,
    success_response,
)
from engines.presence.errors import PresenceError
from engines.presence.models import GatheringRoster

logger = logging.getLogger("merit.http")


def _not_found(message: str) -> dict[str, Any]:
    return error_response(
        code=ReasonCode.NOT_FOUND,
        message=message,
        details={},
    )


def _run_write(
    write_call,
    *,
    dependencies,
    headers: dict[str, Any] | None,
    result_key: str,
) -> dict[str, Any]:
    caller = resolve_caller(headers, dependencies.auth_provider)
    if isinstance(caller, RejectionReason):
        return rejection_response(caller)

    try:
        value = write_call(dependencies.presence_service, caller)
    except PresenceError as exc:
        return rejection_response(exc.reason)
    except ValueError as exc:
        return error_response(
            code=INVALID_REQUEST,
            message=str(exc),
            details={},
        )
    except Exception as exc:
        logger.exception(f"Ledger write failed for caller '{caller}'")
        return error_response(
            code=HANDLER_EXECUTION_FAILED,
            message="Failed to execute ledger command.",
            details={"error_type": type(exc).__name__},
        )

    return success_response({"status": "ACCEPTED", "caller": caller, result_key: value})


# ══════════════════════════════════════════════════════════════
# WRITES
# ══════════════════════════════════════════════════════════════

def post_partner_register(
    request: PartnerRegisterHttpRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    def _call(service, caller):
        return service.register_partner(
            caller=caller,
            tag=request.tag,
            multiplier=request.multiplier,
        )

    return _run_write(_call, dependencies=dependencies, headers=headers, result_key="tag")


def post_gathering_create(
    request: GatheringCreateHttpRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    def _call(service, caller):
        return service.create_gathering(
            caller=caller,
            title=request.title,
            scheduled_at=request.scheduled_at,
            capacity=request.capacity,
            base_points=request.base_points,
            network_tags=request.network_tags,
        )

    return _run_write(
        _call, dependencies=dependencies, headers=headers, result_key="gathering_id",
    )


def post_gathering_join(
    request: GatheringJoinHttpRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    def _call(service, caller):
        return service.join_gathering(caller=caller, gathering_id=request.gathering_id)

    return _run_write(_call, dependencies=dependencies, headers=headers, result_key="proof_id")


def post_merits_claim(
    request: MeritsClaimHttpRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    def _call(service, caller):
        return service.claim_merits(caller=caller, points=request.points)

    return _run_write(_call, dependencies=dependencies, headers=headers, result_key="points")


# ══════════════════════════════════════════════════════════════
# READS
# ══════════════════════════════════════════════════════════════

def get_partner(
    request: PartnerReadRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    partner = dependencies.presence_service.get_partner(request.tag)
    if partner is None:
        return _not_found(f"Partner network '{request.tag}' not found.")
    return success_response(partner.to_dict())


def get_gathering(
    request: GatheringReadRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    gathering = dependencies.presence_service.get_gathering(request.gathering_id)
    if gathering is None:
        return _not_found(f"Gathering {request.gathering_id} not found.")
    return success_response(gathering.to_dict())


def get_roster(
    request: GatheringReadRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    service = dependencies.presence_service
    if service.get_gathering(request.gathering_id) is None:
        return _not_found(f"Gathering {request.gathering_id} not found.")
    roster = service.get_roster(request.gathering_id)
    if roster is None:
        roster = GatheringRoster(gathering_id=request.gathering_id)
    return success_response(roster.to_dict())


def get_merits(
    request: OwnerReadRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    account = dependencies.presence_service.get_merits(request.owner)
    if account is None:
        return _not_found(f"No merit account for '{request.owner}'.")
    return success_response(account.to_dict())


def get_proofs(
    request: OwnerReadRequest,
    dependencies,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    record = dependencies.presence_service.get_proofs(request.owner)
    if record is None:
        return _not_found(f"No proof record for '{request.owner}'.")
    return success_response(record.to_dict())
