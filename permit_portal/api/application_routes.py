from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional
import logging

from permit_portal.core.auth_dependencies import get_current_user, get_optional_user, is_admin_user
from permit_portal.helpers.response_builder import build_application_response
from permit_portal.repositories.application_repository import ApplicationRepository, get_application_repository
from permit_portal.schemas.application_schema import SubmissionFailure, SubmissionResult
from permit_portal.services.audit_service import audit_service
from permit_portal.services.review_service import ReviewService
from permit_portal.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

SIGNED_OUT_MESSAGE = "You must be logged in to submit."
WRONG_ACCOUNT_MESSAGE = "You can only submit applications for your own account"

FAILURE_STATUS_CODES = {
    SubmissionFailure.unauthenticated: status.HTTP_401_UNAUTHORIZED,
    SubmissionFailure.forbidden: status.HTTP_403_FORBIDDEN,
    SubmissionFailure.envelope: status.HTTP_422_UNPROCESSABLE_ENTITY,
    SubmissionFailure.payload: status.HTTP_400_BAD_REQUEST,
    SubmissionFailure.persistence: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_submission_service(repository: ApplicationRepository = Depends(get_application_repository)) -> SubmissionService:
    return SubmissionService(repository)


def get_review_service(repository: ApplicationRepository = Depends(get_application_repository)) -> ReviewService:
    return ReviewService(repository)


def _result_response(result: SubmissionResult) -> JSONResponse:
    status_code = status.HTTP_201_CREATED if result.success else FAILURE_STATUS_CODES[result.reason]
    headers = {"WWW-Authenticate": "Bearer"} if result.reason == SubmissionFailure.unauthenticated else None
    return JSONResponse(status_code=status_code, content=result.to_response(), headers=headers)


# Persists a new application from the wizard's envelope
@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_application(
    type: Optional[str] = Form(None),
    applicantName: Optional[str] = Form(None),
    userId: Optional[str] = Form(None),
    data: Optional[str] = Form(None),
    current_user: Optional[Dict] = Depends(get_optional_user),
    service: SubmissionService = Depends(get_submission_service),
):
    if current_user is None:
        logger.warning("Anonymous submission refused")
        return _result_response(SubmissionResult(
            success=False, reason=SubmissionFailure.unauthenticated, error=SIGNED_OUT_MESSAGE,
        ))

    actor = current_user.get("email") or current_user["id"]

    if userId and userId.strip() and userId.strip() != current_user["id"]:
        logger.warning("User %s tried to submit on behalf of %s", current_user["id"], userId)
        await audit_service.record("submit_application", actor, None, status="failed")
        return _result_response(SubmissionResult(
            success=False, reason=SubmissionFailure.forbidden, error=WRONG_ACCOUNT_MESSAGE,
        ))

    result = await service.save_application(
        {"type": type, "applicantName": applicantName, "userId": userId, "data": data}
    )

    await audit_service.record(
        action="submit_application",
        actor=actor,
        acted=result.applicationId,
        status="successful" if result.success else "failed",
    )
    return _result_response(result)


# Lists the signed-in applicant's own applications, newest first
@router.get("/mine", response_model=List[Dict[str, Any]])
async def get_my_applications(
    current_user: Dict = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    try:
        records = await service.list_for_user(current_user["id"])
        return [build_application_response(record) for record in records]
    except Exception:
        logger.exception("Error retrieving applications for %s", current_user["id"])
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not fetch your applications"
        )


# Returns one application to its owner or to a reviewer
@router.get("/{application_id}", response_model=Dict[str, Any])
async def get_application(
    application_id: str,
    current_user: Dict = Depends(get_current_user),
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
    if record.userId != current_user["id"] and not is_admin_user(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this application")

    return build_application_response(record, include_documents=True)
