"""Identity registration API endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from faceproof.api.models.identity import (
    EmbeddingRequest,
    RegistrationRequest,
    RegistrationResponse,
    UniquenessRequest,
    UniquenessResponse,
    ValidationResponse,
)
from faceproof.core.logging import get_logger
from faceproof.domain.value_objects.verdicts import UniquenessStatus
from faceproof.infrastructure.dependencies import (
    get_registration_service,
    get_uniqueness_coordinator,
    get_validator,
)
from faceproof.services.models import RegistrationStatus
from faceproof.services.registration import RegistrationService
from faceproof.services.uniqueness import UniquenessCoordinator
from faceproof.services.validation import EmbeddingValidator

logger = get_logger(__name__)
router = APIRouter(
    responses={
        422: {"description": "Invalid embedding or request"},
        500: {"description": "Internal server error"},
        503: {"description": "Verdict could not be established"},
    }
)

REGISTRATION_STATUS_CODES = {
    RegistrationStatus.DUPLICATE: 409,
    RegistrationStatus.ALREADY_REGISTERED: 409,
    RegistrationStatus.INVALID: 422,
    RegistrationStatus.INDETERMINATE: 503,
    RegistrationStatus.FAILED: 503,
}


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate an embedding",
    description="Runs the statistical sanity checks on an embedding without storing it.",
)
async def validate_embedding(
    request: EmbeddingRequest,
    validator: EmbeddingValidator = Depends(get_validator),
) -> ValidationResponse:
    verdict = validator.validate(request.embedding)
    return ValidationResponse.from_verdict(verdict)


@router.post(
    "/uniqueness",
    response_model=UniquenessResponse,
    summary="Check a face against every registration",
    description="Compares an embedding with every prior registration and returns the verdict.",
    responses={
        200: {
            "description": "Check completed",
            "content": {
                "application/json": {
                    "example": {
                        "status": "duplicate",
                        "best_score": 0.93,
                        "matched_identity": "0x9f2b6b5c1e0d4a8f3c7e2d1b0a9f8e7d6c5b4a39",
                        "matched_content_address": "bafkreihdwdcefgh4dqkjv67uzcmw7ojee6xedzdetojuzjevtenxquvyku",
                        "reason": None,
                        "entries_total": 12,
                        "entries_compared": 12,
                        "entries_skipped": 0,
                        "coverage": 1.0,
                    }
                }
            },
        },
    },
)
async def check_uniqueness(
    request: UniquenessRequest,
    coordinator: UniquenessCoordinator = Depends(get_uniqueness_coordinator),
) -> UniquenessResponse:
    """Check whether a face is already registered.

    Unique and duplicate verdicts are both answered with 200. An invalid
    embedding is a 422 and a check that could not cover the registry is a 503.
    """
    verdict = await coordinator.check_uniqueness(
        request.embedding,
        identity=request.identity,
        exclude_content_address=request.exclude_content_address,
    )
    response = UniquenessResponse.from_verdict(verdict)
    if verdict.status == UniquenessStatus.INVALID:
        raise HTTPException(status_code=422, detail=response.model_dump())
    if verdict.status == UniquenessStatus.INDETERMINATE:
        raise HTTPException(status_code=503, detail=response.model_dump())
    return response


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=201,
    summary="Register a face for an identity",
    description="Validates, stores and commits a face embedding if no similar face is registered.",
    responses={
        409: {
            "description": "Face or identity already registered",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "status": "duplicate",
                            "reason": "A similar face is already registered",
                            "matched_identity": "0x9f2b6b5c1e0d4a8f3c7e2d1b0a9f8e7d6c5b4a39",
                            "best_score": 0.93,
                        }
                    }
                }
            },
        },
    },
)
async def register_identity(
    request: RegistrationRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegistrationResponse:
    """Register a face embedding for a wallet.

    Raises:
        HTTPException: 409, 422 or 503 for every outcome other than registered
    """
    try:
        outcome = await service.register(request.identity, request.embedding, request.public_key)
    except Exception as e:
        logger.error("Unexpected error during registration", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while processing the request",
        )

    if outcome.registered:
        return RegistrationResponse.from_outcome(outcome)

    detail = {"status": outcome.status.value, "reason": outcome.reason}
    if outcome.verdict is not None and outcome.status == RegistrationStatus.DUPLICATE:
        detail["matched_identity"] = outcome.verdict.matched_identity
        detail["best_score"] = outcome.verdict.best_score
    logger.info("Registration not completed", identity=request.identity, **detail)
    raise HTTPException(status_code=REGISTRATION_STATUS_CODES[outcome.status], detail=detail)
