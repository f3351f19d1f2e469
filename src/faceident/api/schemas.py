"""Pydantic request/response schemas for the faceident API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from faceident.matching.types import FaceRecord, IdentificationResult, MatchCandidate, VerificationResult


class HashRequest(BaseModel):
    """Descriptor to fingerprint."""

    descriptor: list[float] = Field(min_length=1, description="Face descriptor (e.g., 128 floats)")


class HashResponse(BaseModel):
    """Binary fingerprint of a descriptor."""

    hash: str = Field(description="String of '0'/'1' characters")
    bits: int


class RegisterFaceRequest(BaseModel):
    """Descriptor-level registration input."""

    descriptor: list[float] = Field(min_length=1)
    confidence: float = Field(ge=0.0, le=1.0, description="Detector confidence (0.0-1.0)")
    user_data: Any = None


class FaceRecordModel(BaseModel):
    """A registered face as stored by the caller."""

    face_id: str
    descriptor: list[float]
    hash: str
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: int = Field(description="Creation time, milliseconds since the epoch")
    user_data: Any = None

    @classmethod
    def from_record(cls, record: FaceRecord[Any]) -> FaceRecordModel:
        return cls(
            face_id=record.face_id,
            descriptor=list(record.descriptor),
            hash=record.hash,
            confidence=record.confidence,
            timestamp=record.timestamp,
            user_data=record.user_data,
        )

    def to_record(self) -> FaceRecord[Any]:
        return FaceRecord(
            face_id=self.face_id,
            descriptor=tuple(self.descriptor),
            hash=self.hash,
            confidence=self.confidence,
            timestamp=self.timestamp,
            user_data=self.user_data,
        )


class IdentifyRequest(BaseModel):
    """Query descriptor plus the caller's stored records."""

    descriptor: list[float] = Field(min_length=1)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    records: list[FaceRecordModel] = Field(default_factory=list)
    match_threshold: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Overrides the configured threshold when set"
    )


class MatchCandidateModel(BaseModel):
    """A scored record."""

    face_id: str
    similarity: float = Field(ge=0.0, le=1.0)
    user_data: Any = None

    @classmethod
    def from_candidate(cls, candidate: MatchCandidate[Any]) -> MatchCandidateModel:
        return cls(face_id=candidate.face_id, similarity=candidate.similarity, user_data=candidate.user_data)


class QueryFace(BaseModel):
    """The query face as seen by the matcher."""

    descriptor: list[float]
    hash: str
    confidence: float


class IdentificationResponse(BaseModel):
    """Identification outcome."""

    match_found: bool
    best_match: MatchCandidateModel | None
    similarity: float = Field(description="Best similarity seen, even below the threshold")
    candidates: list[MatchCandidateModel] = Field(description="Top candidates, descending similarity")
    query: QueryFace

    @classmethod
    def from_result(cls, result: IdentificationResult[Any]) -> IdentificationResponse:
        best = result.best_match
        return cls(
            match_found=result.match_found,
            best_match=MatchCandidateModel.from_candidate(best) if best is not None else None,
            similarity=result.similarity,
            candidates=[MatchCandidateModel.from_candidate(c) for c in result.candidates],
            query=QueryFace(
                descriptor=list(result.query_descriptor),
                hash=result.query_hash,
                confidence=result.query_confidence,
            ),
        )


class VerifyRequest(BaseModel):
    """Two descriptors to compare."""

    descriptor_a: list[float] = Field(min_length=1)
    descriptor_b: list[float] = Field(min_length=1)
    match_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class VerificationResponse(BaseModel):
    """Pairwise verification outcome."""

    is_match: bool
    similarity: float
    threshold: float

    @classmethod
    def from_result(cls, result: VerificationResult) -> VerificationResponse:
        return cls(is_match=result.is_match, similarity=result.similarity, threshold=result.threshold)


class ConfigResponse(BaseModel):
    """Active matching configuration."""

    match_threshold: float
    min_confidence: float
    hash_bits: int
    hamming_threshold: int
    filter_cutover: int
    top_k: int
    descriptor_dim: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    concurrent_requests: int
    queue_depth: int
    records_scored: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
