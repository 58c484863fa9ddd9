import os
import logging
from dotenv import load_dotenv

load_dotenv()


def _split_csv(raw: str) -> list:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    PROJECT_NAME: str = "KASUPDA Permit Portal"
    MONGODB_URI: str = os.getenv("MONGODB_URI")
    MONGODB_DB_NAME: str = os.getenv("MONGODB_DB_NAME")
    # "mongo" persists through Beanie, "memory" keeps records in-process
    APPLICATION_STORE: str = os.getenv("APPLICATION_STORE", "mongo").strip().lower()
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:3000")
    ADMIN_EMAILS: list = [e.lower() for e in _split_csv(os.getenv("ADMIN_EMAILS", ""))]
    AUDIT_LOG_ENABLED: bool = os.getenv("AUDIT_LOG_ENABLED", "true").lower() in ("1", "true", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def uses_mongo(self) -> bool:
        return self.APPLICATION_STORE == "mongo"

    @property
    def audit_enabled(self) -> bool:
        # Audit documents live in MongoDB next to the applications
        return self.AUDIT_LOG_ENABLED and self.uses_mongo


settings = Settings()


def _mask_secret(val: str) -> str:
    if not val:
        return "<missing>"
    if len(val) <= 8:
        return "*" * len(val)
    return f"{val[:4]}...{val[-4:]}"


logging.getLogger(__name__).debug(
    "Loaded settings (redacted): store=%s db=%s jwt=%s",
    settings.APPLICATION_STORE,
    settings.MONGODB_DB_NAME,
    _mask_secret(settings.JWT_SECRET_KEY),
)
