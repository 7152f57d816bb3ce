"""
MERIT Presence Engine — Errors
=================================
Typed exceptions raised by the PresenceService Python API.

Each class corresponds to one stable ledger code. The rejection
that caused it travels along as .reason for auditing.
"""

from __future__ import annotations

from core.commands.rejection import NUMERIC_CODES, ReasonCode, RejectionReason


class PresenceError(Exception):
    """Base error for presence ledger operations."""

    code = "PRESENCE_ERROR"

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        super().__init__(f"[{reason.code}] {reason.message}")

    @property
    def numeric_code(self) -> int | None:
        return NUMERIC_CODES.get(self.reason.code)


class Unauthorized(PresenceError):
    code = ReasonCode.UNAUTHORIZED


class InvalidGatheringParams(PresenceError):
    code = ReasonCode.INVALID_GATHERING_PARAMS


class InvalidNetworkTag(PresenceError):
    code = ReasonCode.INVALID_NETWORK_TAG


class NetworkNotFound(PresenceError):
    code = ReasonCode.NETWORK_NOT_FOUND


class RecordNotFound(PresenceError):
    code = ReasonCode.NOT_FOUND


class CapacityReached(PresenceError):
    code = ReasonCode.CAPACITY_REACHED


class DuplicateRegistration(PresenceError):
    code = ReasonCode.DUPLICATE_REGISTRATION


class InsufficientMerits(PresenceError):
    code = ReasonCode.INSUFFICIENT_MERITS


class MeritAwardFailed(PresenceError):
    code = ReasonCode.MERIT_AWARD_FAILED


class CollectionLimitReached(PresenceError):
    code = ReasonCode.COLLECTION_LIMIT_REACHED


_ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        Unauthorized,
        InvalidGatheringParams,
        InvalidNetworkTag,
        NetworkNotFound,
        RecordNotFound,
        CapacityReached,
        DuplicateRegistration,
        InsufficientMerits,
        MeritAwardFailed,
        CollectionLimitReached,
    )
}


def error_for_reason(reason: RejectionReason) -> PresenceError:
    """Build the typed error for a rejection; unknown codes get the base class."""
    return _ERRORS_BY_CODE.get(reason.code, PresenceError)(reason)
