"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from faceident.api.middleware import verify_api_key
from faceident.api.schemas import (
    ConfigResponse,
    ErrorResponse,
    FaceRecordModel,
    HashRequest,
    HashResponse,
    HealthResponse,
    IdentificationResponse,
    IdentifyRequest,
    RegisterFaceRequest,
    VerificationResponse,
    VerifyRequest,
)
from faceident.matching.registration import build_record

if TYPE_CHECKING:
    from faceident.config import Settings
    from faceident.matching.matcher import Matcher
    from faceident.ml.inference import MatchingPool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])

_BUSY_RESPONSE = {status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse}}


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_matching_pool(request: Request) -> MatchingPool:
    pool: MatchingPool = request.app.state.matching_pool
    return pool


def _get_matcher(request: Request) -> Matcher:
    matcher: Matcher = request.app.state.matcher
    return matcher


def _busy() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Matching capacity exhausted, retry later"},
    )


@router.post(
    "/hash",
    response_model=HashResponse,
    summary="Compute the binary fingerprint of a descriptor",
)
async def compute_hash(request: Request, body: HashRequest) -> HashResponse:
    """Return the hash used for candidate prefiltering."""
    encoder = _get_matcher(request).encoder
    face_hash = encoder.encode(body.descriptor)
    return HashResponse(hash=face_hash, bits=len(face_hash))


@router.post(
    "/faces",
    response_model=FaceRecordModel,
    status_code=status.HTTP_201_CREATED,
    summary="Build a face record from a descriptor",
)
async def register_face(request: Request, body: RegisterFaceRequest) -> FaceRecordModel:
    """Create a record for the caller to store; nothing is persisted here."""
    encoder = _get_matcher(request).encoder
    record = build_record(body.descriptor, body.confidence, encoder, body.user_data)
    logger.info("Registered face %s", record.face_id)
    return FaceRecordModel.from_record(record)


@router.post(
    "/identify",
    response_model=IdentificationResponse,
    responses=_BUSY_RESPONSE,
    summary="Identify a descriptor against stored records",
)
async def identify(request: Request, body: IdentifyRequest) -> IdentificationResponse | JSONResponse:
    """Rank the supplied records against the query descriptor."""
    settings = _get_settings(request)
    pool = _get_matching_pool(request)
    threshold = settings.match_threshold if body.match_threshold is None else body.match_threshold
    records = [model.to_record() for model in body.records]

    try:
        result = await pool.identify(body.descriptor, body.confidence, records, threshold)
    except TimeoutError:
        return _busy()
    return IdentificationResponse.from_result(result)


@router.post(
    "/verify",
    response_model=VerificationResponse,
    responses=_BUSY_RESPONSE,
    summary="Verify whether two descriptors match",
)
async def verify(request: Request, body: VerifyRequest) -> VerificationResponse | JSONResponse:
    """Compare two descriptors against the match threshold."""
    settings = _get_settings(request)
    pool = _get_matching_pool(request)
    threshold = settings.match_threshold if body.match_threshold is None else body.match_threshold

    try:
        result = await pool.verify(body.descriptor_a, body.descriptor_b, threshold)
    except TimeoutError:
        return _busy()
    return VerificationResponse.from_result(result)


@router.get(
    "/config",
    response_model=ConfigResponse,
    summary="Active matching configuration",
)
async def get_config(request: Request) -> ConfigResponse:
    settings = _get_settings(request)
    return ConfigResponse(
        match_threshold=settings.match_threshold,
        min_confidence=settings.min_confidence,
        hash_bits=settings.hash_bits,
        hamming_threshold=settings.hamming_threshold,
        filter_cutover=settings.filter_cutover,
        top_k=settings.top_k,
        descriptor_dim=settings.descriptor_dim,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    pool = _get_matching_pool(request)
    return HealthResponse(
        status="ok",
        concurrent_requests=pool.active_count,
        queue_depth=pool.queue_depth,
        records_scored=pool.records_scored,
    )
