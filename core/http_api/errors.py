"""
MERIT HTTP API - Error Mapping
==============================
Stable transport error mapping for command rejections and handler failures.
"""

from __future__ import annotations

from typing import Any, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.http_api.contracts import HttpApiErrorBody, HttpApiResponse

INVALID_REQUEST = "INVALID_REQUEST"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
HANDLER_EXECUTION_FAILED = "HANDLER_EXECUTION_FAILED"

HTTP_STATUS_BY_CODE = {
    ReasonCode.AUTH_REQUIRED: 401,
    ReasonCode.AUTH_INVALID: 401,
    ReasonCode.UNAUTHORIZED: 403,
    ReasonCode.CAPACITY_REACHED: 409,
    ReasonCode.DUPLICATE_REGISTRATION: 409,
    ReasonCode.INSUFFICIENT_MERITS: 409,
    ReasonCode.COLLECTION_LIMIT_REACHED: 409,
    ReasonCode.MERIT_AWARD_FAILED: 502,
    ReasonCode.INVALID_GATHERING_PARAMS: 400,
    ReasonCode.INVALID_NETWORK_TAG: 400,
    ReasonCode.NETWORK_NOT_FOUND: 404,
    ReasonCode.NOT_FOUND: 404,
    INVALID_REQUEST: 400,
    METHOD_NOT_ALLOWED: 405,
    HANDLER_EXECUTION_FAILED: 500,
}


def http_status_for(code: str) -> int:
    """Unknown rejection codes are client errors."""
    return HTTP_STATUS_BY_CODE.get(code, 400)


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(
    data: Any,
    *,
    meta: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data, meta=meta).to_dict()


def map_rejection_reason(reason: RejectionReason) -> HttpApiErrorBody:
    return HttpApiErrorBody(
        code=reason.code,
        message=reason.message,
        details={
            "policy_name": reason.policy_name,
            "numeric_code": reason.numeric_code,
        },
    )


def rejection_response(
    reason: RejectionReason,
    *,
    extra_details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    mapped = map_rejection_reason(reason)
    details = dict(mapped.details)
    if extra_details:
        details.update(extra_details)
    return error_response(
        code=mapped.code,
        message=mapped.message,
        details=details,
    )
