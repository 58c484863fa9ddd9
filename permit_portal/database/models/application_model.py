from beanie import Document
from pydantic import Field
from typing import Optional, Dict, Any

from permit_portal.schemas.application_schema import ApplicationStatusEnum, ApplicationRecord


class Application(Document):
    # Field names mirror the persisted record shape shared with the web client
    type: str = Field(..., description="Permit or service category")
    applicantName: str = Field(..., description="Display name of the applicant")
    userId: Optional[str] = Field(None, description="Identity of the submitting actor")
    status: str = Field(default=ApplicationStatusEnum.pending.value, description="Current status of the application")
    date: str = Field(..., description="Creation timestamp as an ISO-8601 string")
    data: Dict[str, Any] = Field(default_factory=dict, description="Serialized form value tree")

    class Settings:
        name = "applications"
        indexes = ["userId", "status", "date"]

    def to_record(self) -> ApplicationRecord:
        return ApplicationRecord(
            id=str(self.id),
            type=self.type,
            applicantName=self.applicantName,
            userId=self.userId,
            status=self.status,
            date=self.date,
            data=self.data or {},
        )
