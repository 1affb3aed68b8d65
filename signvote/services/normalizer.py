from datetime import datetime, timezone
from typing import Optional

from ..core.errors import SignatureValidationError, ValidationErrorKind
from ..schemas.signatures import NormalizedSignature, SignatureSubmission

DATA_URI_PREFIX = "data:image/"


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def strip_data_uri(signature_data: str) -> str:
    """
    Drop an image data-URI header, keeping only the encoded payload

    "data:image/png;base64,AAA" -> "AAA". Input without the header, or with
    nothing after the first comma, is returned unchanged.
    """
    if not signature_data.startswith(DATA_URI_PREFIX):
        return signature_data
    _, _, encoded = signature_data.partition(",")
    return encoded or signature_data


def server_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and Z suffix"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SignatureNormalizer:
    """Validates and canonicalizes signature submissions"""

    def validate(self, payload: SignatureSubmission) -> None:
        """
        Structural validation, first failure wins

        Raises:
            SignatureValidationError
        """
        if not payload.signature_data or not _present(payload.signature_name):
            raise SignatureValidationError(ValidationErrorKind.MISSING_SIGNATURE_OR_NAME)
        if not _present(payload.room_number):
            raise SignatureValidationError(ValidationErrorKind.MISSING_ROOM)
        if not payload.device_uuid or not payload.device_fingerprint:
            raise SignatureValidationError(ValidationErrorKind.MISSING_DEVICE_INFO)

    def normalize(self, payload: SignatureSubmission) -> NormalizedSignature:
        self.validate(payload)
        return NormalizedSignature(
            signature=payload.signature_name.strip(),
            room_number=payload.room_number.strip(),
            signature_image=strip_data_uri(payload.signature_data),
            device_uuid=payload.device_uuid,
            device_fingerprint=payload.device_fingerprint,
            created_at=payload.signature_time or server_timestamp(),
        )


# Singleton instance
signature_normalizer = SignatureNormalizer()
