import logging
from typing import Optional
from datetime import datetime

from permit_portal.core.config import settings
from permit_portal.database.models.audit_log_model import AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    """Writes audit log entries to MongoDB using Beanie."""

    @property
    def enabled(self) -> bool:
        return settings.audit_enabled

    async def create_audit(self, *, action: str, actor: Optional[str] = None, acted: Optional[str] = None, status: str = "successful", timestamp: Optional[datetime] = None) -> Optional[AuditLog]:
        if not self.enabled:
            return None
        try:
            audit = AuditLog(
                action=action,
                actor=actor,
                acted=acted,
                status=status,
                timestamp=timestamp or datetime.now(),
            )
            await audit.insert()
            return audit
        except Exception as e:
            logger.error(f"Failed to create audit log: {e}")
            raise

    # Audit failures are logged and never propagate to the request
    async def record(self, action: str, actor: Optional[str], acted: Optional[str], status: str = "successful") -> None:
        try:
            await self.create_audit(action=action, actor=actor, acted=acted, status=status)
        except Exception:
            logger.exception(f"Failed to write {action} audit log")


audit_service = AuditService()
