"""
MERIT Command Layer — Rejection Model
========================================
Structured rejection reasons for denied commands.

A reason is not an event. The bus embeds it in the
`*.rejected` event payload, and the HTTP layer maps its code
to a status. Ledger codes also carry a stable numeric code.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """code is a ReasonCode value; policy_name names the check that refused."""

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    @property
    def numeric_code(self) -> int | None:
        """Stable numeric code, or None for codes outside the ledger taxonomy."""
        return NUMERIC_CODES.get(self.code)

    def to_dict(self) -> dict:
        """Serialize for event payload."""
        return {
            "code": self.code,
            "numeric_code": self.numeric_code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# COMMAND REJECTED (raised by engine policies at execution time)
# ══════════════════════════════════════════════════════════════

class CommandRejectedError(Exception):
    """
    Raised by an engine handler when a state-dependent policy rejects.

    The CommandBus converts it into a REJECTED outcome and
    journals the rejection event. Nothing is committed.
    """

    def __init__(self, reason: RejectionReason):
        if not isinstance(reason, RejectionReason):
            raise TypeError("reason must be RejectionReason.")
        self.reason = reason
        super().__init__(f"[{reason.code}] {reason.message}")


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Authorization ─────────────────────────────────────────
    UNAUTHORIZED = "UNAUTHORIZED"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID = "AUTH_INVALID"

    # ── Input validation ──────────────────────────────────────
    INVALID_GATHERING_PARAMS = "INVALID_GATHERING_PARAMS"
    INVALID_NETWORK_TAG = "INVALID_NETWORK_TAG"

    # ── State conflict ────────────────────────────────────────
    CAPACITY_REACHED = "CAPACITY_REACHED"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    INSUFFICIENT_MERITS = "INSUFFICIENT_MERITS"
    COLLECTION_LIMIT_REACHED = "COLLECTION_LIMIT_REACHED"
    NETWORK_NOT_FOUND = "NETWORK_NOT_FOUND"  # declared, no path raises it
    NOT_FOUND = "NOT_FOUND"

    # ── External collaborator ─────────────────────────────────
    MERIT_AWARD_FAILED = "MERIT_AWARD_FAILED"

    # ── Command structure ─────────────────────────────────────
    INVALID_COMMAND_STRUCTURE = "INVALID_COMMAND_STRUCTURE"
    INVALID_COMMAND_TYPE = "INVALID_COMMAND_TYPE"
    INVALID_ACTOR = "INVALID_ACTOR"


NUMERIC_CODES = {
    ReasonCode.UNAUTHORIZED: 100,
    ReasonCode.CAPACITY_REACHED: 101,
    ReasonCode.DUPLICATE_REGISTRATION: 102,
    ReasonCode.INSUFFICIENT_MERITS: 103,
    ReasonCode.MERIT_AWARD_FAILED: 104,
    ReasonCode.INVALID_GATHERING_PARAMS: 105,
    ReasonCode.NETWORK_NOT_FOUND: 106,
    ReasonCode.INVALID_NETWORK_TAG: 107,
    ReasonCode.COLLECTION_LIMIT_REACHED: 108,
    ReasonCode.NOT_FOUND: 404,
}
