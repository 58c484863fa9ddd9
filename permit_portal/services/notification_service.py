"""
Notifications for the actor who changed an application's status.

The review console shows these as a toast; here they are logged and returned
to the caller. Nothing is delivered to the applicant.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)


class NotificationService:

    @staticmethod
    def status_changed(application_id: str, status: str, actor: str = None) -> Dict[str, str]:
        notification = {
            "title": f"Application {status}",
            "description": f"The application (ID: {application_id}) has been marked as {status}.",
        }
        logger.info("Notify %s: application %s is now %s", actor or "<unknown>", application_id, status)
        return notification

    @staticmethod
    def status_change_failed(application_id: str, reason: str) -> Dict[str, str]:
        logger.info("Status change for %s failed: %s", application_id, reason)
        return {
            "title": "Error",
            "description": f"Could not update the application status: {reason}",
        }


notification_service = NotificationService()
