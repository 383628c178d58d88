"""
Remote copies of a user's boards, one record per board keyed by board id.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Sequence

import httpx

from hottakes.core.config import REMOTE_API_URL, REMOTE_TIMEOUT
from hottakes.core.errors import RemoteStoreError
from hottakes.schemas.sharing import CloudBoard

logger = logging.getLogger(__name__)


class RemoteBoardStore(ABC):
    @abstractmethod
    async def fetch_boards(self, owner_id: str) -> List[CloudBoard]:
        """All remote boards owned by ``owner_id``."""

    @abstractmethod
    async def push_boards(self, boards: Sequence[CloudBoard]) -> List[CloudBoard]:
        """Upsert ``boards`` by id and return what was stored.

        An existing record keeps its stored sharing policy; sharing changes
        go through the sharing endpoints, not through sync.
        """


class InMemoryRemoteBoardStore(RemoteBoardStore):
    def __init__(self, boards: Optional[Sequence[CloudBoard]] = None):
        self.records: Dict[str, CloudBoard] = {b.id: b for b in boards or []}

    async def fetch_boards(self, owner_id: str) -> List[CloudBoard]:
        return [b for b in self.records.values() if b.owner_id == owner_id]

    async def push_boards(self, boards: Sequence[CloudBoard]) -> List[CloudBoard]:
        stored = []
        for board in boards:
            existing = self.records.get(board.id)
            if existing is not None:
                board = board.model_copy(update={"sharing": existing.sharing})
            self.records[board.id] = board
            stored.append(board)
        return stored


class HttpRemoteBoardStore(RemoteBoardStore):
    """Client for the cloud board service (``hottakes.main``)."""

    def __init__(
        self,
        base_url: str = REMOTE_API_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = REMOTE_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @asynccontextmanager
    async def _session(self):
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            yield client

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            async with self._session() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            logger.error(f"Remote store {method} {path} failed with {e.response.status_code}", exc_info=True)
            raise RemoteStoreError(
                f"{method} {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Remote store {method} {path} failed: {e}", exc_info=True)
            raise RemoteStoreError(f"{method} {path} failed: {e}") from e

    async def fetch_boards(self, owner_id: str) -> List[CloudBoard]:
        response = await self._request("GET", "/api/boards/", params={"owner_id": owner_id})
        return [CloudBoard.model_validate(record) for record in response.json()]

    async def push_boards(self, boards: Sequence[CloudBoard]) -> List[CloudBoard]:
        payload = [board.model_dump(mode="json") for board in boards]
        response = await self._request("PUT", "/api/boards/", json=payload)
        return [CloudBoard.model_validate(record) for record in response.json()]
