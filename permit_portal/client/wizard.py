import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from permit_portal.client.identity import IdentityProvider
from permit_portal.core.exceptions import RawBinaryValueError
from permit_portal.forms import (
    FormSchema,
    StepController,
    StepResult,
    derive_applicant_name,
    encode_payload,
    set_path,
    validate,
)
from permit_portal.schemas.application_schema import SubmissionResult

logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "Complete every step before submitting."
SIGNED_OUT_MESSAGE = "You must be logged in to submit."


class ApplicationWizard:
    """Client-side state for filling in and submitting one permit form.

    Form values may hold `FileReference` objects and dates; they are turned
    into transport-safe values only when the envelope is built. Abandoning a
    wizard discards its state; nothing is saved before submission.
    """

    def __init__(
        self,
        schema: FormSchema,
        client: httpx.AsyncClient,
        identity: IdentityProvider,
        endpoint: str = "/applications",
    ):
        self.schema = schema
        self.client = client
        self.identity = identity
        self.endpoint = endpoint
        self.values: Dict[str, Any] = schema.defaults()
        self.controller = StepController(schema)
        self.errors: Dict[str, str] = {}
        self.application_id: Optional[str] = None

    @property
    def position(self) -> int:
        return self.controller.position

    @property
    def ready_to_submit(self) -> bool:
        return self.controller.ready_to_submit

    def set_value(self, path: str, value: Any) -> None:
        set_path(self.values, path, value)

    def update(self, values: Mapping[str, Any]) -> None:
        for path, value in values.items():
            self.set_value(path, value)

    def advance(self) -> StepResult:
        result = self.controller.advance(self.values)
        self.errors = result.errors
        return result

    def retreat(self) -> StepResult:
        self.errors = {}
        return self.controller.retreat()

    def build_envelope(self, actor_id: str, fallback_name: Optional[str] = None) -> Dict[str, str]:
        return {
            "type": self.schema.type,
            "applicantName": derive_applicant_name(self.schema, self.values, fallback_name),
            "userId": actor_id,
            "data": encode_payload(self.values),
        }

    async def submit(self) -> SubmissionResult:
        if not self.ready_to_submit:
            return SubmissionResult(success=False, error=NOT_READY_MESSAGE)

        actor = await self.identity.wait()
        if actor is None:
            return SubmissionResult(success=False, error=SIGNED_OUT_MESSAGE)

        check = validate(self.schema, self.values)
        if not check.valid:
            self.errors = check.errors
            return SubmissionResult(success=False, error="Please correct the highlighted fields.", fieldErrors=check.errors)

        try:
            envelope = self.build_envelope(actor.id, actor.display_name or actor.email)
        except RawBinaryValueError as e:
            logger.error(f"Submission blocked: {e}")
            return SubmissionResult(success=False, error=str(e))

        try:
            response = await self.client.post(self.endpoint, data=envelope, headers=self.identity.headers)
        except httpx.HTTPError as e:
            logger.error(f"Submission request failed: {e}")
            return SubmissionResult(success=False, error=f"Could not reach the server: {e}")

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Invalid JSON response: {response.text}")
            return SubmissionResult(success=False, error=f"Unexpected response from server (status {response.status_code})")

        if isinstance(body, dict) and "success" in body:
            result = SubmissionResult(**body)
        else:
            error = body.get("error") if isinstance(body, dict) else None
            detail = error.get("message") if isinstance(error, dict) else error
            result = SubmissionResult(success=False, error=detail or f"Submission failed (status {response.status_code})")

        if result.success:
            self.application_id = result.applicationId
            logger.info("Submitted %s as %s", self.schema.type, result.applicationId)
        return result
