"""Documentation service: generate, store and aggregate endpoint documents."""

import asyncio
import logging
from collections import Counter
from contextlib import asynccontextmanager
from typing import Protocol

from api_autodoc.models import DocumentationData, EndpointDetails
from api_autodoc.openapi.generate import aggregate_documents
from api_autodoc.storage import Endpoint, EndpointStore

logger = logging.getLogger(__name__)


class Summarizer(Protocol):
    async def summarize(
        self, observation: DocumentationData, previous: dict | None = None
    ) -> EndpointDetails: ...


class AutodocService:
    """Runs the find, generate, upsert sequence for observed calls.

    The sequence is serialized per (path, method) so concurrent calls for
    the same endpoint cannot both insert or overwrite each other's read.
    """

    def __init__(self, store: EndpointStore, summarizer: Summarizer, info: dict[str, str] | None = None):
        self.store = store
        self.summarizer = summarizer
        self.info = info
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._holders: Counter[tuple[str, str]] = Counter()

    @asynccontextmanager
    async def _key_lock(self, key: tuple[str, str]):
        # A lock lives only while some call holds or waits on it.
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    async def document(self, observation: DocumentationData) -> Endpoint:
        """Generate documentation for ``observation`` and persist it."""
        key = (observation.path, observation.method.upper())
        async with self._key_lock(key):
            existing = await self.store.find_by_key(*key)

            logger.info("Processing %s %s with AI", observation.method, observation.path)
            details = await self.summarizer.summarize(
                observation, existing.document if existing else None
            )
            document = details.to_document()

            if existing:
                logger.info("Updating existing endpoint %s %s", observation.method, observation.path)
                return await self.store.update(existing.id, document)

            logger.info("Creating new endpoint %s %s", observation.method, observation.path)
            return await self.store.insert(observation.path, observation.method, document)

    async def aggregate(self) -> dict:
        """Build the OpenAPI document for every stored endpoint."""
        records = await self.store.list_all_ordered_by_recency()
        return aggregate_documents(records, self.info)
