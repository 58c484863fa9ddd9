import pytest

from permit_portal.core.exceptions import ApplicationNotFoundError, InvalidStatusTransitionError
from permit_portal.repositories.application_repository import InMemoryApplicationRepository
from permit_portal.schemas.application_schema import NewApplication
from permit_portal.services.status_service import StatusService, can_transition, is_terminal


async def _seed(repository, status="Pending"):
    return await repository.create(NewApplication(
        type="Mast Permit",
        applicantName="Zaria Builders Ltd",
        userId="u1",
        status=status,
        date="2024-03-01T09:30:00.000Z",
        data={"orgName": "Zaria Builders Ltd"},
    ))


@pytest.mark.asyncio
async def test_pending_application_can_be_approved():
    repository = InMemoryApplicationRepository()
    application_id = await _seed(repository)

    updated = await StatusService(repository).update_status(application_id, "Approved", actor="reviewer@kasupda.gov.ng")

    assert updated.status.value == "Approved"
    stored = await repository.get_by_id(application_id)
    assert stored.status.value == "Approved"
    assert stored.applicantName == "Zaria Builders Ltd"
    assert stored.date == "2024-03-01T09:30:00.000Z"
    assert stored.data == {"orgName": "Zaria Builders Ltd"}


@pytest.mark.asyncio
async def test_processing_application_can_be_rejected():
    repository = InMemoryApplicationRepository()
    application_id = await _seed(repository, status="Processing")

    updated = await StatusService(repository).update_status(application_id, "Rejected")

    assert updated.status.value == "Rejected"


@pytest.mark.asyncio
@pytest.mark.parametrize("terminal", ["Approved", "Rejected"])
async def test_terminal_status_is_final(terminal):
    repository = InMemoryApplicationRepository()
    application_id = await _seed(repository, status=terminal)

    with pytest.raises(InvalidStatusTransitionError):
        await StatusService(repository).update_status(application_id, "Approved")

    assert (await repository.get_by_id(application_id)).status.value == terminal


@pytest.mark.asyncio
async def test_reviewers_cannot_set_processing():
    repository = InMemoryApplicationRepository()
    application_id = await _seed(repository)

    with pytest.raises(InvalidStatusTransitionError):
        await StatusService(repository).update_status(application_id, "Processing")


@pytest.mark.asyncio
async def test_unknown_status_is_rejected():
    repository = InMemoryApplicationRepository()
    application_id = await _seed(repository)

    with pytest.raises(ValueError):
        await StatusService(repository).update_status(application_id, "Archived")


@pytest.mark.asyncio
async def test_missing_application():
    with pytest.raises(ApplicationNotFoundError):
        await StatusService(InMemoryApplicationRepository()).update_status("APP-0-XXXXX", "Approved")


@pytest.mark.parametrize("current,target,allowed", [
    ("Pending", "Processing", True),
    ("Pending", "Approved", True),
    ("Pending", "Rejected", True),
    ("Processing", "Approved", True),
    ("Processing", "Pending", False),
    ("Approved", "Rejected", False),
    ("Rejected", "Approved", False),
    ("Pending", "Pending", False),
])
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_terminal_statuses():
    assert is_terminal("Approved")
    assert is_terminal("Rejected")
    assert not is_terminal("Pending")
