from permit_portal.database.models.application_model import Application
from permit_portal.database.models.user_model import User
from permit_portal.database.models.audit_log_model import AuditLog
