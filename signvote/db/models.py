from sqlalchemy import Column, String, Integer, Text, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Signature(Base):
    """One petition signature per device; rows are insert-only"""

    __tablename__ = "signatures"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Best-effort origin address at submission time
    ip = Column(String, nullable=True)

    # Device identity (two independent lookup keys)
    device_uuid = Column(String, nullable=False)
    device_fingerprint = Column(String, nullable=False)

    # Signer
    signature = Column(String, nullable=False)  # Typed name, trimmed
    room_number = Column(String, nullable=False)
    signature_image = Column(Text, nullable=True)  # Base64 payload, no data-URI prefix

    # ISO-8601 text; client-supplied value kept verbatim
    created_at = Column(String, nullable=False, index=True)

    __table_args__ = (
        Index("ix_signatures_device_uuid", "device_uuid", unique=True),
        Index("ix_signatures_device_fingerprint", "device_fingerprint", unique=True),
    )

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<Signature(id={self.id}, room={self.room_number})>"
