"""
MERIT HTTP API - Contracts
==========================
Framework-agnostic request/response DTOs for ledger endpoints.

Request DTOs guard transport shape only. Domain bounds (title
length, capacity, multiplier range) are left to the engine so that
they come back as ledger error codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PartnerRegisterHttpRequest:
    tag: Any
    multiplier: Any


@dataclass(frozen=True)
class GatheringCreateHttpRequest:
    title: Any
    scheduled_at: Any
    capacity: Any
    base_points: Any
    network_tags: Any = ()


@dataclass(frozen=True)
class GatheringJoinHttpRequest:
    gathering_id: int

    def __post_init__(self):
        if not _is_int(self.gathering_id):
            raise ValueError("gathering_id must be an integer.")


@dataclass(frozen=True)
class MeritsClaimHttpRequest:
    points: int

    def __post_init__(self):
        if not _is_int(self.points):
            raise ValueError("points must be an integer.")
        if self.points <= 0:
            raise ValueError("points must be > 0.")


@dataclass(frozen=True)
class GatheringReadRequest:
    gathering_id: int

    def __post_init__(self):
        if not _is_int(self.gathering_id):
            raise ValueError("gathering_id must be an integer.")


@dataclass(frozen=True)
class PartnerReadRequest:
    tag: str

    def __post_init__(self):
        if not self.tag or not isinstance(self.tag, str):
            raise ValueError("tag must be a non-empty string.")


@dataclass(frozen=True)
class OwnerReadRequest:
    owner: str

    def __post_init__(self):
        if not self.owner or not isinstance(self.owner, str):
            raise ValueError("owner must be a non-empty string.")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None
    meta: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            body = {"ok": True, "data": self.data}
        else:
            if self.error is None:
                raise ValueError("error must be set when ok is False.")
            body = {"ok": False, "error": self.error.to_dict()}
        if self.meta:
            body["meta"] = dict(self.meta)
        return body
