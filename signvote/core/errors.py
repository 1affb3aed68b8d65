from enum import Enum
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Optional
from starlette.exceptions import HTTPException as StarletteHTTPException


def problem_response(
    request: Request,
    status: int,
    code: str,
    title: str,
    detail: Any,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """
    Return RFC 7807 Problem Details response

    https://datatracker.ietf.org/doc/html/rfc7807
    """
    return JSONResponse(
        status_code=status,
        content={
            "type": f"https://signvote.app/errors/{code.lower().replace('_', '-')}",
            "title": title,
            "status": status,
            "code": code,
            "detail": detail,
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
        },
        headers=headers,
    )


class ValidationErrorKind(str, Enum):
    MISSING_SIGNATURE_OR_NAME = "MissingSignatureOrName"
    MISSING_ROOM = "MissingRoom"
    MISSING_DEVICE_INFO = "MissingDeviceInfo"


VALIDATION_MESSAGES = {
    ValidationErrorKind.MISSING_SIGNATURE_OR_NAME: "Please complete your signature and enter your name",
    ValidationErrorKind.MISSING_ROOM: "Please enter your room number",
    ValidationErrorKind.MISSING_DEVICE_INFO: "Device information is incomplete, please refresh the page and try again",
}

VALIDATION_CODES = {
    ValidationErrorKind.MISSING_SIGNATURE_OR_NAME: "MISSING_SIGNATURE_OR_NAME",
    ValidationErrorKind.MISSING_ROOM: "MISSING_ROOM",
    ValidationErrorKind.MISSING_DEVICE_INFO: "MISSING_DEVICE_INFO",
}


class SignatureValidationError(ValueError):
    """A submission is structurally incomplete"""

    def __init__(self, kind: ValidationErrorKind):
        self.kind = kind
        self.code = VALIDATION_CODES[kind]
        self.message = VALIDATION_MESSAGES[kind]
        super().__init__(self.message)

    def to_response(self, request: Request) -> JSONResponse:
        return problem_response(
            request=request,
            status=status.HTTP_400_BAD_REQUEST,
            code=self.code,
            title="Invalid Signature Submission",
            detail=self.message,
        )


class SignatureNotFoundError(LookupError):
    """Record, or the image on a record, does not exist"""

    def __init__(self, signature_id: int, code: str, message: str):
        self.signature_id = signature_id
        self.code = code
        self.message = message
        super().__init__(message)

    @classmethod
    def missing_record(cls, signature_id: int) -> "SignatureNotFoundError":
        return cls(signature_id, "SIGNATURE_NOT_FOUND", f"Signature {signature_id} does not exist")

    @classmethod
    def missing_image(cls, signature_id: int) -> "SignatureNotFoundError":
        return cls(signature_id, "SIGNATURE_IMAGE_NOT_FOUND", f"Signature {signature_id} has no signature image")


class StorageFailure(Exception):
    """Any failure raised by the storage layer"""

    message = "The signature store is currently unavailable, please try again later"


class StorageConflict(StorageFailure):
    """Insert rejected by a uniqueness constraint"""


async def storage_failure_handler(request: Request, exc: StorageFailure) -> JSONResponse:
    return problem_response(
        request=request,
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="STORAGE_FAILURE",
        title="Internal Server Error",
        detail=exc.message,
    )


async def not_found_handler(request: Request, exc: SignatureNotFoundError) -> JSONResponse:
    return problem_response(
        request=request,
        status=status.HTTP_404_NOT_FOUND,
        code=exc.code,
        title="Signature Not Found",
        detail=exc.message,
    )


HTTP_ERROR_CODES = {
    401: ("UNAUTHORIZED", "Unauthorized"),
    403: ("FORBIDDEN", "Forbidden"),
    404: ("NOT_FOUND", "Not Found"),
    405: ("METHOD_NOT_ALLOWED", "Method Not Allowed"),
}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code, title = HTTP_ERROR_CODES.get(exc.status_code, ("HTTP_ERROR", "Request Failed"))
    return problem_response(
        request=request,
        status=exc.status_code,
        code=code,
        title=title,
        detail=exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return problem_response(
        request=request,
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="INVALID_REQUEST",
        title="Invalid Request Body",
        detail=jsonable_encoder(exc.errors()),
    )
