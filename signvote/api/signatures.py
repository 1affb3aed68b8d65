import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import Optional

from ..schemas.signatures import (
    DeviceIdentity,
    OwnSignatureResponse,
    PublicSignatureList,
    SignAccepted,
    SignatureImage,
    SignatureRecordList,
    SignatureSubmission,
    StatisticsResponse,
    UserStatusResponse,
)
from ..core.config import Settings, get_settings
from ..core.database import get_db
from ..core.errors import SignatureValidationError, ValidationErrorKind, problem_response
from ..db.repository import SignatureRepository
from ..services.identity import IdentityResolver
from ..services.intake import IntakeService
from ..services.statistics import StatisticsAggregator
from ..services.views import SignatureViews

logger = logging.getLogger(__name__)

router = APIRouter()


def get_repository(db: Session = Depends(get_db)) -> SignatureRepository:
    return SignatureRepository(db)


def get_intake_service(repository: SignatureRepository = Depends(get_repository)) -> IntakeService:
    return IntakeService(repository)


def get_views(repository: SignatureRepository = Depends(get_repository)) -> SignatureViews:
    return SignatureViews(repository)


def get_statistics(
    repository: SignatureRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> StatisticsAggregator:
    return StatisticsAggregator(repository, target=settings.SIGNATURE_TARGET)


def client_ip(request: Request) -> Optional[str]:
    """Best-effort origin address (proxy headers first)"""
    for header in ("CF-Connecting-IP", "X-Forwarded-For"):
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/user-status", response_model=UserStatusResponse)
async def user_status(
    request: Request,
    identity: DeviceIdentity,
    repository: SignatureRepository = Depends(get_repository),
):
    """Whether this device has already signed"""
    if not identity.is_complete:
        return SignatureValidationError(ValidationErrorKind.MISSING_DEVICE_INFO).to_response(request)

    record = IdentityResolver(repository).resolve(identity.uuid, identity.fingerprint)
    return UserStatusResponse(
        has_signed=record is not None,
        signature=record.signature if record is not None else None,
    )


@router.post("/sign", response_model=SignAccepted, status_code=status.HTTP_201_CREATED)
async def sign(
    request: Request,
    submission: SignatureSubmission,
    intake: IntakeService = Depends(get_intake_service),
):
    """
    Submit a signature

    **Rejections:**
    - 400 when the signature, name, room or device identity is missing
    - 409 when this device (by uuid or fingerprint) has already signed
    """
    try:
        outcome = intake.submit(submission, origin_ip=client_ip(request))
    except SignatureValidationError as e:
        logger.info(f"Signature submission invalid: {e.kind.value}")
        return e.to_response(request)

    if not outcome.accepted:
        return problem_response(
            request=request,
            status=status.HTTP_409_CONFLICT,
            code="ALREADY_SIGNED",
            title="Already Signed",
            detail="You have already signed",
        )

    return SignAccepted(id=outcome.record.id)


@router.post("/user-signature", response_model=OwnSignatureResponse)
async def user_signature(
    identity: DeviceIdentity,
    views: SignatureViews = Depends(get_views),
) -> OwnSignatureResponse:
    """This device's own signature, or null"""
    return OwnSignatureResponse(signature=views.own_signature(identity.uuid, identity.fingerprint))


@router.get("/all-signatures", response_model=PublicSignatureList)
async def all_signatures(views: SignatureViews = Depends(get_views)) -> PublicSignatureList:
    """Public listing without images or device identifiers"""
    signatures = views.public_listing()
    return PublicSignatureList(signatures=signatures, total=len(signatures))


@router.get("/statistics", response_model=StatisticsResponse)
async def statistics(aggregator: StatisticsAggregator = Depends(get_statistics)) -> StatisticsResponse:
    stats = aggregator.stats()
    return StatisticsResponse(
        total_signatures=stats.total,
        target_signatures=stats.target,
        progress=stats.progress,
    )


@router.get("/admin/signatures", response_model=SignatureRecordList)
async def admin_signatures(views: SignatureViews = Depends(get_views)) -> SignatureRecordList:
    """All stored fields of every signature"""
    signatures = views.admin_listing()
    return SignatureRecordList(signatures=signatures, total=len(signatures))


@router.get("/signature/download/{signature_id}", response_model=SignatureImage)
async def download_signature(
    signature_id: int,
    views: SignatureViews = Depends(get_views),
) -> SignatureImage:
    """Signer name and base64 image for one signature"""
    return views.download_image(signature_id)
