import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import exception_handler

log = logging.getLogger(__name__)


class DomainError(APIException):
    """
    도메인 서비스가 던지는 오류의 공통 베이스.
    - status_code: HTTP 상태
    - default_code: 클라이언트가 분기할 수 있는 안정적인 kind 문자열
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"


class ValidationError(DomainError):
    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "forbidden"


class SelfFollowError(DomainError):
    default_detail = "Cannot follow yourself."
    default_code = "self_follow"


class AlreadyFollowingError(DomainError):
    default_detail = "Already following."
    default_code = "already_following"


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting update, please retry."
    default_code = "conflict"


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "validation_error",
    status.HTTP_401_UNAUTHORIZED: "not_authenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def _code_for(exc, status_code: int) -> str:
    if isinstance(exc, DomainError):
        return exc.default_code
    if isinstance(exc, Http404):
        return "not_found"
    if isinstance(exc, PermissionDenied):
        return "forbidden"
    if isinstance(exc, DRFValidationError):
        return "validation_error"
    if isinstance(exc, APIException) and not isinstance(exc.detail, (list, dict)):
        return str(getattr(exc.detail, "code", None) or exc.default_code)
    return _STATUS_CODES.get(status_code, "error")


def api_exception_handler(exc, context):
    # 모든 오류 응답을 {"detail": str, "code": str} (+ 필드 오류 시 "errors") 형태로 통일
    response = exception_handler(exc, context)
    if response is None:
        return None

    code = _code_for(exc, response.status_code)
    data = response.data
    if isinstance(data, dict) and set(data.keys()) == {"detail"}:
        body = {"detail": str(data["detail"]), "code": code}
    elif isinstance(data, list):
        body = {"detail": " ".join(str(x) for x in data) or "Invalid input.", "code": code}
    else:
        body = {"detail": "Invalid input.", "code": code, "errors": data}

    view = context.get("view")
    log.info("API error %s %s on %s: %s", response.status_code, code, type(view).__name__ if view else "-", body["detail"])
    response.data = body
    return response
