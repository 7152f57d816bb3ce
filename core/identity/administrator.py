"""
MERIT Identity - Administrator Guard
====================================
The ledger's only authorization predicate.

The administrator identity is fixed when the guard is built
(deployment / wiring time) and every administrative command's
caller is compared against that stored value. A caller is never
compared against an identity derived from its own invocation.
"""

from __future__ import annotations

from typing import Optional

from core.commands.base import Command
from core.commands.rejection import ReasonCode, RejectionReason


class AdministratorGuard:
    def __init__(self, administrator_id: str):
        if not administrator_id or not isinstance(administrator_id, str):
            raise ValueError("administrator_id must be a non-empty string.")
        if administrator_id != administrator_id.strip():
            raise ValueError("administrator_id must not carry surrounding whitespace.")
        self._administrator_id = administrator_id

    @property
    def administrator_id(self) -> str:
        return self._administrator_id

    def is_administrator(self, caller: str) -> bool:
        return isinstance(caller, str) and caller == self._administrator_id


def administrator_required_policy(
    command: Command,
    guard: AdministratorGuard,
) -> Optional[RejectionReason]:
    """Administrative commands must come from the stored administrator."""
    if guard.is_administrator(command.actor_id):
        return None
    return RejectionReason(
        code=ReasonCode.UNAUTHORIZED,
        message=f"Caller '{command.actor_id}' is not the administrator.",
        policy_name="administrator_required_policy",
    )
