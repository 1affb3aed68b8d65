from typing import Optional

from ..core.errors import SignatureNotFoundError
from ..db.repository import SignatureRepository
from ..schemas.signatures import (
    OwnSignature,
    PublicSignature,
    SignatureImage,
    SignatureRecord,
)
from .identity import IdentityResolver

PUBLIC_COLUMNS = ("id", "signature", "room_number", "created_at")


class SignatureViews:
    """Public and administrative projections of stored signatures"""

    def __init__(self, repository: SignatureRepository):
        self.repository = repository
        self.resolver = IdentityResolver(repository)

    def public_listing(self) -> list[PublicSignature]:
        """Redacted records, most recent first"""
        rows = self.repository.list_all(PUBLIC_COLUMNS, order_by="created_at", descending=True)
        return [PublicSignature(**row) for row in rows]

    def own_signature(self, uuid: Optional[str], fingerprint: Optional[str]) -> Optional[OwnSignature]:
        """The caller's own signature, or None when unknown or identity incomplete"""
        if not uuid or not fingerprint:
            return None
        record = self.resolver.resolve(uuid, fingerprint)
        if record is None:
            return None
        return OwnSignature.model_validate(record)

    def admin_listing(self) -> list[SignatureRecord]:
        """Every field of every record; callers must be authorized"""
        return [SignatureRecord(**row) for row in self.repository.list_all()]

    def download_image(self, signature_id: int) -> SignatureImage:
        """
        Name and image payload for one record

        Raises:
            SignatureNotFoundError: no such record, or record without an image
        """
        record = self.repository.find_by_id(signature_id)
        if record is None:
            raise SignatureNotFoundError.missing_record(signature_id)
        if not record.signature_image:
            raise SignatureNotFoundError.missing_image(signature_id)
        return SignatureImage(
            user_id=record.id,
            signature_name=record.signature,
            signature_data=record.signature_image,
        )
