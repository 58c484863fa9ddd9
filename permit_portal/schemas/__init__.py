from permit_portal.schemas.user_schemas import UserCreate, UserResponse, Token
from permit_portal.schemas.application_schema import (
    ApplicationStatusEnum,
    ApplicationEnvelope,
    ApplicationRecord,
    NewApplication,
    SubmissionFailure,
    SubmissionResult,
    StatusUpdateRequest,
    ApplicationSummary,
    TypeBreakdown,
    ChartPoint,
    DocumentEntry,
)
