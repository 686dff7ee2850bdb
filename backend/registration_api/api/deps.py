from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header, Request, Response
from sqlalchemy.orm import Session

from registration_api.core.errors import RateLimitError
from registration_api.core.logging import get_logger
from registration_api.core.settings import Settings, get_settings
from registration_api.db.session import SessionLocal
from registration_api.services.admin import AdminQueryService
from registration_api.services.media import MediaStore, build_media_store
from registration_api.services.rate_limit import SlidingWindowRateLimiter
from registration_api.services.registration import RegistrationService

logger = get_logger(__name__)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


_SUBMISSION_LIMITER: SlidingWindowRateLimiter | None = None


def get_submission_limiter(settings: Settings = Depends(get_settings)) -> SlidingWindowRateLimiter:
    global _SUBMISSION_LIMITER

    if _SUBMISSION_LIMITER is None:
        _SUBMISSION_LIMITER = SlidingWindowRateLimiter(
            limit=settings.SUBMISSION_RATE_LIMIT,
            window_seconds=settings.SUBMISSION_RATE_WINDOW_SECONDS,
        )
    return _SUBMISSION_LIMITER


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_submission_rate_limit(
    request: Request,
    response: Response,
    limiter: SlidingWindowRateLimiter = Depends(get_submission_limiter),
) -> None:
    address = client_address(request)
    try:
        limiter.hit(address)
    except RateLimitError:
        logger.warning("submission rate limit exceeded for %s", address)
        raise
    response.headers["X-RateLimit-Limit"] = str(limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(address))


_MEDIA_STORE: MediaStore | None = None


def get_media_store(settings: Settings = Depends(get_settings)) -> MediaStore:
    global _MEDIA_STORE

    # Built once; the Cloudinary SDK keeps its config process-wide.
    if _MEDIA_STORE is None:
        _MEDIA_STORE = build_media_store(settings)
    return _MEDIA_STORE


def get_registration_service(db: Session = Depends(get_db)) -> RegistrationService:
    return RegistrationService(db)


def get_admin_service(
    x_admin_token: str | None = Header(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AdminQueryService:
    return AdminQueryService(db, settings).authorize(x_admin_token)
