import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


Subscriber = Callable[[Optional[Identity]], None]


class IdentityProvider:
    """The signed-in actor as seen by the client.

    The actor is resolved lazily from ``GET /auth/me`` and may be absent.
    Subscribers are called with the current value whenever it is resolved.
    """

    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None):
        self._client = client
        self._token = token
        self._current: Optional[Identity] = None
        self._resolved = False
        self._lock = asyncio.Lock()
        self._subscribers: List[Subscriber] = []

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    @property
    def current(self) -> Optional[Identity]:
        return self._current

    def set_token(self, token: Optional[str]) -> None:
        self._token = token
        self._resolved = False
        self._current = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)
        if self._resolved:
            callback(self._current)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def resolve(self) -> Optional[Identity]:
        async with self._lock:
            identity = None
            if self._token:
                try:
                    response = await self._client.get("/auth/me", headers=self.headers)
                except httpx.HTTPError as e:
                    logger.warning(f"Could not resolve current user: {e}")
                    response = None
                if response is not None and response.status_code == 200:
                    body = response.json()
                    identity = Identity(
                        id=body["id"],
                        email=body.get("email"),
                        display_name=body.get("full_name"),
                    )
                elif response is not None:
                    logger.info("No signed-in user (status %s)", response.status_code)

            self._current = identity
            self._resolved = True

        for callback in list(self._subscribers):
            callback(identity)
        return identity

    async def wait(self) -> Optional[Identity]:
        if not self._resolved:
            return await self.resolve()
        return self._current
