import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from permit_portal.core.exceptions import MalformedPayloadError
from permit_portal.forms.attachments import decode_payload
from permit_portal.helpers.response_builder import utc_now_iso
from permit_portal.repositories.application_repository import ApplicationRepository, get_application_repository
from permit_portal.schemas.application_schema import (
    ApplicationEnvelope,
    ApplicationStatusEnum,
    NewApplication,
    SubmissionFailure,
    SubmissionResult,
)

logger = logging.getLogger(__name__)

ENVELOPE_FIELDS = ("type", "applicantName", "userId", "data")

ENVELOPE_FIELD_MESSAGES = {
    "type": "Application type must be provided.",
    "applicantName": "Applicant name must be provided.",
    "userId": "User ID must be provided.",
    "data": "Application data must be provided.",
}

INVALID_ENVELOPE_MESSAGE = "Invalid application data provided."
MALFORMED_PAYLOAD_MESSAGE = "Internal server error: Could not process form data."
SUCCESS_MESSAGE = "Application submitted successfully!"


def _field_errors(error: ValidationError) -> Dict[str, str]:
    field_errors: Dict[str, str] = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item.get("loc") else "envelope"
        field_errors.setdefault(field, ENVELOPE_FIELD_MESSAGES.get(field, item.get("msg", "Invalid value")))
    return field_errors


class SubmissionService:
    """The single write path that creates Application records.

    Only the envelope is validated here; the inner form data was checked
    step by step on the client and is stored as decoded. Every outcome is a
    `SubmissionResult`. A retry after any failure creates a new record.
    """

    def __init__(self, repository: Optional[ApplicationRepository] = None):
        self._repository = repository

    @property
    def repository(self) -> ApplicationRepository:
        return self._repository or get_application_repository()

    async def save_application(self, envelope: Mapping[str, Any]) -> SubmissionResult:
        raw = {field: envelope.get(field) for field in ENVELOPE_FIELDS}
        logger.info("Received %s submission for user %s", raw.get("type"), raw.get("userId"))

        try:
            validated = ApplicationEnvelope(**raw)
        except ValidationError as e:
            field_errors = _field_errors(e)
            logger.warning("Rejected submission envelope: %s", field_errors)
            return SubmissionResult(
                success=False,
                reason=SubmissionFailure.envelope,
                error=f"{INVALID_ENVELOPE_MESSAGE} {' '.join(field_errors.values())}",
                fieldErrors=field_errors,
            )

        try:
            data = decode_payload(validated.data)
        except MalformedPayloadError as e:
            # Details stay in the server log
            logger.error("Could not parse form data for %s: %s", validated.userId, e)
            return SubmissionResult(
                success=False,
                reason=SubmissionFailure.payload,
                error=MALFORMED_PAYLOAD_MESSAGE,
            )

        application = NewApplication(
            type=validated.type,
            applicantName=validated.applicantName,
            userId=validated.userId,
            status=ApplicationStatusEnum.pending,
            date=utc_now_iso(),
            data=data,
        )

        try:
            application_id = await self.repository.create(application)
        except Exception as e:
            logger.exception("Application submission error")
            return SubmissionResult(
                success=False,
                reason=SubmissionFailure.persistence,
                error=f"Failed to save application: {e}",
            )

        logger.info("Application %s created for user %s", application_id, validated.userId)
        return SubmissionResult(success=True, message=SUCCESS_MESSAGE, applicationId=application_id)


submission_service = SubmissionService()
