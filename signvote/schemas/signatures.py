from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class SignatureSubmission(BaseModel):
    """Body of a signature submission

    Fields are optional here; completeness is checked by the normalizer so
    each missing piece gets its own user-facing reason.
    """

    signature_data: Optional[str] = None
    signature_name: Optional[str] = None
    room_number: Optional[str] = None
    device_uuid: Optional[str] = None
    device_fingerprint: Optional[str] = None
    signature_time: Optional[str] = None


class DeviceIdentity(BaseModel):
    """Device identity pair presented by a client"""

    uuid: Optional[str] = None
    fingerprint: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.uuid) and bool(self.fingerprint)


class NormalizedSignature(BaseModel):
    """Canonical signature fields ready to be stored"""

    signature: str
    room_number: str
    signature_image: str
    device_uuid: str
    device_fingerprint: str
    created_at: str


class SignatureRecord(BaseModel):
    """Full stored record (administrative view)"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    ip: Optional[str] = None
    device_uuid: str
    device_fingerprint: str
    signature: str
    room_number: str
    signature_image: Optional[str] = None
    created_at: str


class PublicSignature(BaseModel):
    """Redacted record: no image, no device identifiers"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    signature: str
    room_number: str
    created_at: str


class OwnSignature(BaseModel):
    """A device's own signature as shown back to it"""

    model_config = ConfigDict(from_attributes=True)

    signature: str
    signature_image: Optional[str] = None
    created_at: str
    room_number: str


class SignatureImage(BaseModel):
    """Download payload for a single signature image"""

    user_id: int
    signature_name: str
    signature_data: str


class SignatureStats(BaseModel):
    total: int
    target: int
    progress: float


# ========== RESPONSES ==========

class SignAccepted(BaseModel):
    message: str = "Thank you for signing!"
    id: int


class UserStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_signed: bool = Field(..., alias="hasSigned")
    signature: Optional[str] = None


class OwnSignatureResponse(BaseModel):
    signature: Optional[OwnSignature] = None


class PublicSignatureList(BaseModel):
    signatures: list[PublicSignature]
    total: int


class SignatureRecordList(BaseModel):
    signatures: list[SignatureRecord]
    total: int


class StatisticsResponse(BaseModel):
    total_signatures: int
    target_signatures: int
    progress: float
