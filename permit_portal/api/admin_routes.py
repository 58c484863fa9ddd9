from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from typing import Any, Dict, List, Optional
import io
import csv
import logging

from permit_portal.core.auth_dependencies import get_admin_user
from permit_portal.core.exceptions import ApplicationNotFoundError, InvalidStatusTransitionError
from permit_portal.helpers.response_builder import build_application_response, extract_documents
from permit_portal.repositories.application_repository import ApplicationRepository, get_application_repository
from permit_portal.schemas.application_schema import ApplicationSummary, StatusUpdateRequest
from permit_portal.services.audit_service import audit_service
from permit_portal.services.notification_service import notification_service
from permit_portal.services.review_service import ReviewService
from permit_portal.services.status_service import StatusService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/applications", tags=["Review Console"])

EXPORT_COLUMNS = ["id", "applicantName", "type", "userId", "status", "date"]


def get_review_service(repository: ApplicationRepository = Depends(get_application_repository)) -> ReviewService:
    return ReviewService(repository)


def get_status_service(repository: ApplicationRepository = Depends(get_application_repository)) -> StatusService:
    return StatusService(repository)


# Lists all applications, optionally filtered by search term and status
@router.get("", response_model=List[Dict[str, Any]])
async def list_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    current_user: Dict = Depends(get_admin_user),
    service: ReviewService = Depends(get_review_service),
):
    try:
        records = await service.list_applications(search=search, status=status_filter)
        return [build_application_response(record) for record in records]
    except Exception:
        logger.exception("Error listing applications")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch applications"
        )


# Counts by status and by permit type for the dashboard
@router.get("/summary", response_model=ApplicationSummary)
async def get_summary(
    current_user: Dict = Depends(get_admin_user),
    service: ReviewService = Depends(get_review_service),
):
    try:
        return await service.summary()
    except Exception:
        logger.exception("Error building application summary")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch dashboard statistics"
        )


# Downloads the filtered list as CSV
@router.get("/export")
async def export_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    current_user: Dict = Depends(get_admin_user),
    service: ReviewService = Depends(get_review_service),
):
    try:
        records = await service.list_applications(search=search, status=status_filter)

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_COLUMNS)
        for record in records:
            row = record.model_dump(mode="json")
            writer.writerow([row.get(column) for column in EXPORT_COLUMNS])

        buffer.seek(0)
        return StreamingResponse(buffer, media_type="text/csv", headers={
            "Content-Disposition": 'attachment; filename="applications.csv"'
        })
    except Exception as e:
        logger.exception("CSV export failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to generate CSV")


# Returns one application with the documents found in its form data
@router.get("/{application_id}", response_model=Dict[str, Any])
async def get_application_detail(
    application_id: str,
    current_user: Dict = Depends(get_admin_user),
    service: ReviewService = Depends(get_review_service),
):
    try:
        record = await service.get_application(application_id)
    except Exception:
        logger.exception("Error retrieving application %s", application_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch the application"
        )
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return build_application_response(record, include_documents=True)


# Approves or rejects an application
@router.put("/{application_id}/status")
async def update_application_status(
    application_id: str,
    status_update: StatusUpdateRequest,
    current_user: Dict = Depends(get_admin_user),
    service: StatusService = Depends(get_status_service),
):
    actor = current_user.get("email") or current_user.get("id")
    try:
        updated = await service.update_status(application_id, status_update.status, actor=actor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ApplicationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidStatusTransitionError as e:
        await audit_service.record("update_status", actor, application_id, status="failed")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating application status: {e}")
        await audit_service.record("update_status", actor, application_id, status="failed")
        notification = notification_service.status_change_failed(application_id, str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=notification["description"]
        )

    await audit_service.record("update_status", actor, application_id)
    notification = notification_service.status_changed(application_id, updated.status.value, actor=actor)
    return {
        "message": "Application status updated successfully",
        "application": build_application_response(updated),
        "notification": notification,
    }


# File contents are never stored, so there is nothing to download
@router.get("/{application_id}/documents/{slot}/download")
async def download_document(
    application_id: str,
    slot: str,
    current_user: Dict = Depends(get_admin_user),
    service: ReviewService = Depends(get_review_service),
):
    record = await service.get_application(application_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")

    document = next((doc for doc in extract_documents(record.data) if doc.slot == slot), None)
    if document is None or not document.uploaded:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")

    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail=f"File download for '{document.name}' is not implemented; only file metadata is stored."
    )
