"""
MERIT Django Adapter Views
==========================
Pass-through HTTP views over core/http_api handlers.
"""

from __future__ import annotations

import json
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
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
    INVALID_REQUEST,
    METHOD_NOT_ALLOWED,
    error_response,
    http_status_for,
)
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


def _headers_from_request(request: HttpRequest) -> dict[str, str]:
    return {str(key): str(value) for key, value in request.headers.items()}


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _json_payload(payload: dict[str, Any]) -> JsonResponse:
    if payload.get("ok"):
        return JsonResponse(payload, status=200)
    return JsonResponse(payload, status=http_status_for(payload["error"]["code"]))


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except Exception as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _dispatch_write(write_handler, request_contract_factory, request: HttpRequest, **path_args):
    headers = _headers_from_request(request)
    try:
        body = _parse_json_body(request)
        contract = request_contract_factory(body=body, **path_args)
    except KeyError as exc:
        return _json_error(INVALID_REQUEST, f"Missing field {exc}.", status=400)
    except ValueError as exc:
        return _json_error(INVALID_REQUEST, str(exc), status=400)

    payload = write_handler(
        contract,
        build_dependencies(),
        headers=headers,
    )
    return _json_payload(payload)


def _dispatch_read(read_handler, contract_factory, request: HttpRequest) -> JsonResponse:
    try:
        contract = contract_factory()
    except ValueError as exc:
        return _json_error(INVALID_REQUEST, str(exc), status=400)

    payload = read_handler(
        contract,
        build_dependencies(),
        headers=_headers_from_request(request),
    )
    return _json_payload(payload)


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        METHOD_NOT_ALLOWED,
        "Method not allowed for this endpoint.",
        status=405,
    )


def _partner_register_contract_factory(*, body):
    return PartnerRegisterHttpRequest(
        tag=body["tag"],
        multiplier=body["multiplier"],
    )


def _gathering_create_contract_factory(*, body):
    return GatheringCreateHttpRequest(
        title=body["title"],
        scheduled_at=body["scheduled_at"],
        capacity=body["capacity"],
        base_points=body["base_points"],
        network_tags=body.get("network_tags", []),
    )


def _gathering_join_contract_factory(*, body, gathering_id):
    return GatheringJoinHttpRequest(gathering_id=gathering_id)


def _merits_claim_contract_factory(*, body):
    return MeritsClaimHttpRequest(points=body["points"])


@csrf_exempt
def partners_register_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(
        post_partner_register,
        _partner_register_contract_factory,
        request,
    )


@csrf_exempt
def partner_detail_view(request: HttpRequest, tag: str) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_read(get_partner, lambda: PartnerReadRequest(tag=tag), request)


@csrf_exempt
def gatherings_create_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(
        post_gathering_create,
        _gathering_create_contract_factory,
        request,
    )


@csrf_exempt
def gathering_detail_view(request: HttpRequest, gathering_id: int) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_read(
        get_gathering,
        lambda: GatheringReadRequest(gathering_id=gathering_id),
        request,
    )


@csrf_exempt
def gathering_roster_view(request: HttpRequest, gathering_id: int) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_read(
        get_roster,
        lambda: GatheringReadRequest(gathering_id=gathering_id),
        request,
    )


@csrf_exempt
def gathering_join_view(request: HttpRequest, gathering_id: int) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(
        post_gathering_join,
        _gathering_join_contract_factory,
        request,
        gathering_id=gathering_id,
    )


@csrf_exempt
def merits_claim_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(
        post_merits_claim,
        _merits_claim_contract_factory,
        request,
    )


@csrf_exempt
def merits_detail_view(request: HttpRequest, owner: str) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_read(get_merits, lambda: OwnerReadRequest(owner=owner), request)


@csrf_exempt
def proofs_detail_view(request: HttpRequest, owner: str) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    return _dispatch_read(get_proofs, lambda: OwnerReadRequest(owner=owner), request)
