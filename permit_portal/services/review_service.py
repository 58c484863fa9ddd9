import logging
from typing import Dict, Iterable, List, Optional

from permit_portal.repositories.application_repository import ApplicationRepository, get_application_repository
from permit_portal.schemas.application_schema import (
    ApplicationRecord,
    ApplicationStatusEnum,
    ApplicationSummary,
    ChartPoint,
    TypeBreakdown,
)

logger = logging.getLogger(__name__)


def simplify_type(application_type: str) -> str:
    """`Building Permit (Individual)` -> `Building Permit`."""
    return (application_type or "").split("(")[0].strip()


def chart_label(simple_type: str) -> str:
    return simple_type.replace(" Permit", "")


def matches_search(record: ApplicationRecord, search: Optional[str]) -> bool:
    if not search or not search.strip():
        return True
    term = search.strip().lower()
    return term in (record.applicantName or "").lower() or term in record.id.lower()


def status_filter(status: Optional[str]) -> Optional[str]:
    """`None` and `all` mean no status filter."""
    return None if not status or status.lower() == "all" else status


def filter_applications(
    records: Iterable[ApplicationRecord],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[ApplicationRecord]:
    """Free-text match on name or id plus exact status, newest first."""
    wanted = status_filter(status)
    selected = [
        record for record in records
        if matches_search(record, search) and (wanted is None or record.status.value == wanted)
    ]
    return sorted(selected, key=lambda r: r.date, reverse=True)


def summarize_applications(records: Iterable[ApplicationRecord]) -> ApplicationSummary:
    """Counts by status bucket and by simplified type.

    Anything that is neither Approved nor Rejected counts as pending.
    """
    summary = ApplicationSummary()
    by_type: Dict[str, TypeBreakdown] = {}

    for record in records:
        bucket = by_type.setdefault(simplify_type(record.type), TypeBreakdown())
        summary.total += 1
        bucket.total += 1
        if record.status == ApplicationStatusEnum.approved:
            summary.approved += 1
            bucket.approved += 1
        elif record.status == ApplicationStatusEnum.rejected:
            summary.rejected += 1
            bucket.rejected += 1
        else:
            summary.pending += 1
            bucket.pending += 1

    summary.byType = by_type
    summary.chart = [
        ChartPoint(name=chart_label(name), approved=b.approved, pending=b.pending, rejected=b.rejected)
        for name, b in by_type.items()
    ]
    return summary


class ReviewService:
    """Read side for the applicant dashboard and the review console.

    Everything is recomputed from the full record set on each call.
    """

    def __init__(self, repository: Optional[ApplicationRepository] = None):
        self._repository = repository

    @property
    def repository(self) -> ApplicationRepository:
        return self._repository or get_application_repository()

    async def list_applications(self, search: Optional[str] = None, status: Optional[str] = None) -> List[ApplicationRecord]:
        try:
            records = await self.repository.query(status=status_filter(status), newest_first=True)
        except Exception as e:
            logger.error(f"Failed to list applications: {e}")
            raise RuntimeError(f"Failed to list applications: {str(e)}")
        results = filter_applications(records, search=search, status=status)
        logger.info("Listed %d of %d applications (search=%r, status=%r)", len(results), len(records), search, status)
        return results

    # Records without a userId never appear here
    async def list_for_user(self, user_id: str) -> List[ApplicationRecord]:
        if not user_id:
            return []
        try:
            return await self.repository.query(user_id=user_id, newest_first=True)
        except Exception as e:
            logger.error(f"Failed to list applications for {user_id}: {e}")
            raise RuntimeError(f"Failed to list applications: {str(e)}")

    async def get_application(self, application_id: str) -> Optional[ApplicationRecord]:
        try:
            return await self.repository.get_by_id(application_id)
        except Exception as e:
            logger.error(f"Failed to fetch application {application_id}: {e}")
            raise RuntimeError(f"Failed to fetch application: {str(e)}")

    async def summary(self) -> ApplicationSummary:
        try:
            records = await self.repository.query(newest_first=True)
        except Exception as e:
            logger.error(f"Failed to build application summary: {e}")
            raise RuntimeError(f"Failed to build application summary: {str(e)}")
        return summarize_applications(records)


review_service = ReviewService()
