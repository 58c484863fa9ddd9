from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import Any, Dict, List, Optional


class ApplicationStatusEnum(str, Enum):
    pending = "Pending"
    processing = "Processing"
    approved = "Approved"
    rejected = "Rejected"


class ApplicationEnvelope(BaseModel):
    """The top-level fields carried by a submission; `data` stays encoded."""
    type: str = Field(..., min_length=1, description="Permit or service category")
    applicantName: str = Field(..., min_length=1, description="Display name of the applicant")
    userId: str = Field(..., min_length=1, description="Identity of the submitting actor")
    data: str = Field(..., min_length=1, description="Encoded form value tree")

    @field_validator("type", "applicantName", "userId")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class ApplicationRecord(BaseModel):
    """An Application as read back from the store."""
    id: str
    type: str
    applicantName: str
    userId: Optional[str] = None
    status: ApplicationStatusEnum = ApplicationStatusEnum.pending
    date: str = Field(..., description="Creation time, ISO-8601")
    data: Dict[str, Any] = Field(default_factory=dict)


class NewApplication(BaseModel):
    type: str
    applicantName: str
    userId: Optional[str] = None
    status: ApplicationStatusEnum = ApplicationStatusEnum.pending
    date: str
    data: Dict[str, Any] = Field(default_factory=dict)


class SubmissionFailure(str, Enum):
    unauthenticated = "unauthenticated"
    forbidden = "forbidden"
    envelope = "invalid_envelope"
    payload = "malformed_payload"
    persistence = "persistence_error"


class SubmissionResult(BaseModel):
    """Discriminated outcome of a submission: `success` plus id or error."""
    success: bool
    reason: Optional[SubmissionFailure] = None
    message: Optional[str] = None
    applicationId: Optional[str] = None
    error: Optional[str] = None
    fieldErrors: Optional[Dict[str, str]] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="Target status, Approved or Rejected")


class TypeBreakdown(BaseModel):
    total: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = 0


class ChartPoint(BaseModel):
    name: str
    approved: int
    pending: int
    rejected: int


class ApplicationSummary(BaseModel):
    total: int = 0
    approved: int = 0
    rejected: int = 0
    pending: int = Field(0, description="Everything that is neither Approved nor Rejected")
    byType: Dict[str, TypeBreakdown] = Field(default_factory=dict)
    chart: List[ChartPoint] = Field(default_factory=list)


class DocumentEntry(BaseModel):
    slot: str
    label: str
    name: Optional[str] = None
    size: Optional[int] = None
    mediaType: Optional[str] = None
    uploaded: bool = False
    downloadAvailable: bool = False
