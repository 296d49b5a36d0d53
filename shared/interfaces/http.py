"""HTTP helpers turning application Results into DRF responses."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.access import Caller
from shared.application.result import Result
from shared.domain.errors import DomainError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "conflict": status.HTTP_409_CONFLICT,
    "external": status.HTTP_502_BAD_GATEWAY,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def caller_from_request(request) -> Caller:
    return Caller.from_user(request.user)


def error_response(error: DomainError) -> Response:
    http_status = STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    payload = error.to_dict()
    if error.kind == "external" and not settings.DEBUG:
        # Gateway diagnostics are only exposed outside production
        payload = {"code": error.code, "detail": error.default_message}
    return Response(payload, status=http_status)


def result_response(result: Result, serialize=None, *, success_status: int = status.HTTP_200_OK) -> Response:
    """Render a Result: serialized value on success, mapped error otherwise."""
    if not result.ok:
        return error_response(result.error)
    data = serialize(result.value) if serialize else result.value
    return Response(data, status=success_status)
