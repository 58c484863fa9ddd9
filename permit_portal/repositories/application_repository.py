import copy
import time
import string
import secrets
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from permit_portal.core.config import settings
from permit_portal.database.models.application_model import Application
from permit_portal.schemas.application_schema import ApplicationRecord, NewApplication

logger = logging.getLogger(__name__)


class ApplicationRepository(ABC):
    """Persistent collection of Application records.

    Writes are atomic per record only. ``update_fields`` overwrites the given
    fields without comparing against what the caller last read, so concurrent
    writers resolve as last-writer-wins.
    """

    @abstractmethod
    async def create(self, application: NewApplication) -> str:
        ...

    @abstractmethod
    async def get_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        ...

    @abstractmethod
    async def update_fields(self, application_id: str, partial: Dict[str, Any]) -> bool:
        ...

    @abstractmethod
    async def query(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[ApplicationRecord]:
        ...


class BeanieApplicationRepository(ApplicationRepository):
    """MongoDB-backed store using the Beanie `Application` document."""

    @staticmethod
    def _object_id(application_id: str) -> Optional[ObjectId]:
        try:
            return ObjectId(application_id)
        except (InvalidId, TypeError):
            logger.warning(f"Invalid ObjectId format: {application_id}")
            return None

    async def create(self, application: NewApplication) -> str:
        document = Application(**application.model_dump(mode="json"))
        await document.insert()
        logger.info(f"Application saved with ID: {document.id}")
        return str(document.id)

    async def get_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        object_id = self._object_id(application_id)
        if object_id is None:
            return None
        document = await Application.find_one({"_id": object_id})
        return document.to_record() if document else None

    async def update_fields(self, application_id: str, partial: Dict[str, Any]) -> bool:
        object_id = self._object_id(application_id)
        if object_id is None:
            return False
        document = await Application.find_one({"_id": object_id})
        if not document:
            return False
        await document.set(partial)
        return True

    async def query(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[ApplicationRecord]:
        filters: Dict[str, Any] = {}
        if user_id is not None:
            filters["userId"] = user_id
        if status:
            filters["status"] = status
        sort_dir = -1 if newest_first else 1
        documents = await Application.find(filters).sort([("date", sort_dir)]).to_list()
        return [document.to_record() for document in documents]


def generate_prototype_id() -> str:
    suffix = "".join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(5))
    return f"APP-{int(time.time() * 1000)}-{suffix}"


class InMemoryApplicationRepository(ApplicationRepository):
    """Process-local store, used for development and tests."""

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create(self, application: NewApplication) -> str:
        async with self._lock:
            application_id = generate_prototype_id()
            while application_id in self._records:
                application_id = generate_prototype_id()
            record = application.model_dump(mode="json")
            record["id"] = application_id
            self._records[application_id] = record
        logger.info(f"Application saved with ID: {application_id}")
        return application_id

    async def get_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        record = self._records.get(application_id)
        return ApplicationRecord(**copy.deepcopy(record)) if record else None

    async def update_fields(self, application_id: str, partial: Dict[str, Any]) -> bool:
        async with self._lock:
            record = self._records.get(application_id)
            if record is None:
                return False
            record.update(copy.deepcopy(partial))
        return True

    async def query(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[ApplicationRecord]:
        records = [
            record for record in self._records.values()
            if (user_id is None or record.get("userId") == user_id)
            and (not status or record.get("status") == status)
        ]
        records.sort(key=lambda r: r.get("date") or "", reverse=newest_first)
        return [ApplicationRecord(**copy.deepcopy(record)) for record in records]


_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Return the store chosen by ``APPLICATION_STORE``; one instance per process."""
    global _repository
    if _repository is None:
        if settings.uses_mongo:
            _repository = BeanieApplicationRepository()
        else:
            _repository = InMemoryApplicationRepository()
        logger.info(f"Using {type(_repository).__name__} for applications")
    return _repository
