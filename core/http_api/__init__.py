"""
MERIT HTTP API - Public API
===========================
"""

from core.http_api.contracts import (
    GatheringCreateHttpRequest,
    GatheringJoinHttpRequest,
    GatheringReadRequest,
    HttpApiErrorBody,
    HttpApiResponse,
    MeritsClaimHttpRequest,
    OwnerReadRequest,
    PartnerReadRequest,
    PartnerRegisterHttpRequest,
)
from core.http_api.dependencies import HttpApiDependencies
from core.http_api.errors import (
    HTTP_STATUS_BY_CODE,
    error_response,
    http_status_for,
    map_rejection_reason,
    rejection_response,
    success_response,
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

__all__ = [
    "PartnerRegisterHttpRequest",
    "GatheringCreateHttpRequest",
    "GatheringJoinHttpRequest",
    "MeritsClaimHttpRequest",
    "GatheringReadRequest",
    "PartnerReadRequest",
    "OwnerReadRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "HTTP_STATUS_BY_CODE",
    "error_response",
    "http_status_for",
    "success_response",
    "map_rejection_reason",
    "rejection_response",
    "post_partner_register",
    "post_gathering_create",
    "post_gathering_join",
    "post_merits_claim",
    "get_partner",
    "get_gathering",
    "get_roster",
    "get_merits",
    "get_proofs",
]
