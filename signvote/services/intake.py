"""
Signature intake: accept or reject a new submission

One signature per device. A device is the same device when either its
uuid or its fingerprint has been seen before.
"""
import logging
from enum import Enum
from typing import Optional

from ..core.errors import StorageConflict
from ..db.models import Signature
from ..db.repository import SignatureRepository
from ..schemas.signatures import SignatureSubmission
from .normalizer import SignatureNormalizer, signature_normalizer

logger = logging.getLogger(__name__)


class IntakeStatus(str, Enum):
    ACCEPTED = "accepted"
    ALREADY_SIGNED = "already_signed"


class IntakeOutcome:
    """Result of a submission: the stored record, or a rejection"""

    def __init__(self, status: IntakeStatus, record: Optional[Signature] = None):
        self.status = status
        self.record = record

    @property
    def accepted(self) -> bool:
        return self.status == IntakeStatus.ACCEPTED

    @classmethod
    def already_signed(cls) -> "IntakeOutcome":
        return cls(IntakeStatus.ALREADY_SIGNED)

    def __repr__(self) -> str:
        record_id = self.record.id if self.record is not None else None
        return f"<IntakeOutcome(status={self.status.value}, id={record_id})>"


class IntakeService:
    """Orchestrates validation, the duplicate check and the single insert"""

    def __init__(
        self,
        repository: SignatureRepository,
        normalizer: SignatureNormalizer = signature_normalizer,
    ):
        self.repository = repository
        self.normalizer = normalizer

    def submit(self, payload: SignatureSubmission, origin_ip: Optional[str]) -> IntakeOutcome:
        """
        Accept or reject a signature submission

        Steps:
        1. Structural validation (raises SignatureValidationError)
        2. Combined uuid OR fingerprint existence check
        3. Normalize and insert exactly one row

        Raises:
            SignatureValidationError: incomplete submission, nothing written
            StorageFailure: storage unavailable
        """
        self.normalizer.validate(payload)

        # A match on either identifier is enough to reject
        existing = self.repository.find_by_or(
            "device_uuid", payload.device_uuid,
            "device_fingerprint", payload.device_fingerprint,
        )
        if existing:
            logger.info(
                "Signature rejected: device already signed",
                extra={"existing_signature_id": existing[0].id},
            )
            return IntakeOutcome.already_signed()

        normalized = self.normalizer.normalize(payload)
        try:
            signature_id = self.repository.insert(ip=origin_ip, **normalized.model_dump())
        except StorageConflict:
            # Concurrent submission from the same device won the insert
            logger.info("Signature rejected: concurrent submission from the same device")
            return IntakeOutcome.already_signed()

        record = self.repository.find_by_id(signature_id)
        logger.info(
            "Signature accepted",
            extra={"signature_id": signature_id, "room_number": normalized.room_number},
        )
        return IntakeOutcome(IntakeStatus.ACCEPTED, record)
