import pytest

from permit_portal.repositories.application_repository import InMemoryApplicationRepository
from permit_portal.schemas.application_schema import ApplicationRecord, NewApplication
from permit_portal.services.review_service import (
    ReviewService,
    filter_applications,
    simplify_type,
    summarize_applications,
)


def record(id, status, type="Building Permit (Individual)", name="Amina Bello", date="2024-03-01T09:00:00.000Z"):
    return ApplicationRecord(id=id, type=type, applicantName=name, userId="u1", status=status, date=date)


def test_summary_counts_each_status_bucket():
    records = [
        record("APP-1", "Approved"),
        record("APP-2", "Approved"),
        record("APP-3", "Rejected"),
        record("APP-4", "Pending"),
    ]

    summary = summarize_applications(records)

    assert (summary.total, summary.approved, summary.rejected, summary.pending) == (4, 2, 1, 1)


def test_processing_counts_as_pending():
    summary = summarize_applications([record("APP-1", "Processing"), record("APP-2", "Pending")])

    assert summary.pending == 2
    assert summary.total == summary.approved + summary.rejected + summary.pending


def test_summary_groups_by_simplified_type():
    records = [
        record("APP-1", "Approved", type="Building Permit (Individual)"),
        record("APP-2", "Rejected", type="Building Permit (Organization)"),
        record("APP-3", "Pending", type="Mast Permit"),
    ]

    summary = summarize_applications(records)

    assert set(summary.byType) == {"Building Permit", "Mast Permit"}
    assert summary.byType["Building Permit"].total == 2
    assert summary.byType["Building Permit"].approved == 1
    assert [point.name for point in summary.chart] == ["Building", "Mast"]


def test_simplify_type():
    assert simplify_type("Building Permit (Organization)") == "Building Permit"
    assert simplify_type("DIN Application") == "DIN Application"


def test_filter_by_search_and_status_newest_first():
    records = [
        record("APP-1", "Pending", name="Amina Bello", date="2024-03-01T09:00:00.000Z"),
        record("APP-2", "Approved", name="Musa Ibrahim", date="2024-03-03T09:00:00.000Z"),
        record("APP-3", "Pending", name="Amina Yusuf", date="2024-03-02T09:00:00.000Z"),
    ]

    assert [r.id for r in filter_applications(records, search="amina")] == ["APP-3", "APP-1"]
    assert [r.id for r in filter_applications(records, search="app-2")] == ["APP-2"]
    assert [r.id for r in filter_applications(records, status="Pending")] == ["APP-3", "APP-1"]
    assert [r.id for r in filter_applications(records, status="all")] == ["APP-2", "APP-3", "APP-1"]


@pytest.mark.asyncio
async def test_applicant_sees_only_own_applications():
    repository = InMemoryApplicationRepository()
    for user_id, date in (("u1", "2024-03-01T09:00:00.000Z"), ("u2", "2024-03-02T09:00:00.000Z"), ("u1", "2024-03-03T09:00:00.000Z")):
        await repository.create(NewApplication(
            type="DIN Application", applicantName="Applicant", userId=user_id, date=date,
        ))

    mine = await ReviewService(repository).list_for_user("u1")

    assert [r.userId for r in mine] == ["u1", "u1"]
    assert mine[0].date > mine[1].date
    assert await ReviewService(repository).list_for_user("") == []


@pytest.mark.asyncio
async def test_service_summary_reads_every_record():
    repository = InMemoryApplicationRepository()
    for status in ("Approved", "Pending"):
        await repository.create(NewApplication(
            type="Shop Owners Permit", applicantName="Applicant", userId="u1",
            status=status, date="2024-03-01T09:00:00.000Z",
        ))

    summary = await ReviewService(repository).summary()

    assert summary.total == 2
    assert summary.byType["Shop Owners Permit"].approved == 1


class RecordingRepository(InMemoryApplicationRepository):
    def __init__(self):
        super().__init__()
        self.queries = []

    async def query(self, user_id=None, status=None, newest_first=True):
        self.queries.append({"user_id": user_id, "status": status})
        return await super().query(user_id=user_id, status=status, newest_first=newest_first)


@pytest.mark.asyncio
async def test_status_filter_is_applied_by_the_store():
    repository = RecordingRepository()
    for status in ("Approved", "Pending", "Approved"):
        await repository.create(NewApplication(
            type="Mast Permit", applicantName="Zaria Builders Ltd", userId="u1",
            status=status, date="2024-03-01T09:00:00.000Z",
        ))
    service = ReviewService(repository)

    approved = await service.list_applications(status="Approved")
    everything = await service.list_applications(status="all")

    assert [r.status.value for r in approved] == ["Approved", "Approved"]
    assert len(everything) == 3
    assert [q["status"] for q in repository.queries] == ["Approved", None]
