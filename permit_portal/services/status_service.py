import logging
from typing import Dict, Optional, Set

from permit_portal.core.exceptions import ApplicationNotFoundError, InvalidStatusTransitionError
from permit_portal.repositories.application_repository import ApplicationRepository, get_application_repository
from permit_portal.schemas.application_schema import ApplicationRecord, ApplicationStatusEnum

logger = logging.getLogger(__name__)

Status = ApplicationStatusEnum

ALLOWED_TRANSITIONS: Dict[Status, Set[Status]] = {
    Status.pending: {Status.processing, Status.approved, Status.rejected},
    Status.processing: {Status.approved, Status.rejected},
    Status.approved: set(),
    Status.rejected: set(),
}

# Processing is only ever implied; reviewers decide
ADMIN_TARGETS: Set[Status] = {Status.approved, Status.rejected}

TERMINAL_STATUSES: Set[Status] = {status for status, targets in ALLOWED_TRANSITIONS.items() if not targets}


def parse_status(value: str) -> Status:
    try:
        return Status(value)
    except ValueError:
        raise ValueError(f"Unknown status '{value}'. Expected one of: {', '.join(s.value for s in Status)}") from None


def can_transition(current: str, target: str) -> bool:
    return parse_status(target) in ALLOWED_TRANSITIONS[parse_status(current)]


def is_terminal(status: str) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


class StatusService:
    """Administrative status changes.

    The write is a blind overwrite of `status`: the transition is checked
    against the record as read, but nothing stops another writer between the
    read and the write, so the last write wins.
    """

    def __init__(self, repository: Optional[ApplicationRepository] = None):
        self._repository = repository

    @property
    def repository(self) -> ApplicationRepository:
        return self._repository or get_application_repository()

    # Moves an application to Approved or Rejected and returns the updated record
    async def update_status(self, application_id: str, target: str, actor: Optional[str] = None) -> ApplicationRecord:
        logger.info(f"Updating status for application {application_id} to: {target}")
        new_status = parse_status(target)

        record = await self.repository.get_by_id(application_id)
        if record is None:
            logger.warning(f"Application {application_id} not found for status update")
            raise ApplicationNotFoundError(application_id)

        if new_status not in ADMIN_TARGETS or not can_transition(record.status.value, new_status.value):
            logger.warning(f"Rejected transition {record.status.value} -> {new_status.value} for {application_id}")
            raise InvalidStatusTransitionError(record.status.value, new_status.value)

        try:
            updated = await self.repository.update_fields(application_id, {"status": new_status.value})
        except Exception as e:
            logger.error(f"Error updating application status: {e}")
            raise RuntimeError(f"Failed to update application status: {str(e)}")

        if not updated:
            raise ApplicationNotFoundError(application_id)

        logger.info(f"Status updated successfully for application {application_id} by {actor}")
        return record.model_copy(update={"status": new_status})


status_service = StatusService()
