from typing import Optional

from ..db.models import Signature
from ..db.repository import SignatureRepository


class IdentityResolver:
    """Maps a device identity pair to its prior signature, if any"""

    def __init__(self, repository: SignatureRepository):
        self.repository = repository

    def resolve(self, uuid: Optional[str], fingerprint: Optional[str]) -> Optional[Signature]:
        """
        Look up by device_uuid first, then fall back to device_fingerprint

        A device that rotates one identifier but keeps the other is still
        recognised. Returns None when neither matches.
        """
        record = self.repository.find_by("device_uuid", uuid)
        if record is None:
            record = self.repository.find_by("device_fingerprint", fingerprint)
        return record
