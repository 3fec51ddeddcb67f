"""Batch synchronization of FDC foods to the content store."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

from food_sync.adapters.mutation_client import MutationClient
from food_sync.domain.foods import (
    FetchedFood,
    FoodDocument,
    MutationBatch,
    PortionEntry,
    SubmissionResult,
)
from food_sync.services.assembly import PortionSortKey, assemble_document

_logger = logging.getLogger(__name__)


class FoodRepository(Protocol):
    """Read interface over the relational FDC data."""

    def fetch(self, fdc_id: str) -> FetchedFood:
        """Return every row known for an identifier; missing rows are absent."""


@dataclass
class FoodSyncService:
    """Builds food documents and submits them as one mutation batch."""

    mutation_client: MutationClient | None = None
    sort_key: PortionSortKey = PortionSortKey.UNIT

    def build_batch(
        self,
        repository: FoodRepository,
        identifiers: Sequence[str],
        overrides: Mapping[str, list[PortionEntry]] | None = None,
    ) -> MutationBatch:
        """Fetch and assemble every identifier, dropping those not found."""
        overrides = overrides or {}
        documents: list[FoodDocument] = []
        total = len(identifiers)
        for index, identifier in enumerate(identifiers, start=1):
            _logger.info("Processing %s of %s", index, total)
            fetched = repository.fetch(identifier)
            document = assemble_document(
                identifier,
                fetched,
                overrides.get(identifier, ()),
                sort_key=self.sort_key,
            )
            if document is not None:
                documents.append(document)
        return MutationBatch(documents=tuple(documents))

    async def submit(self, batch: MutationBatch) -> SubmissionResult:
        """Submit the batch; failures are logged and returned, never raised."""
        if not batch.documents:
            _logger.warning("No documents to upload, skipping submission")
            return SubmissionResult(submitted=0)
        if self.mutation_client is None:
            raise RuntimeError("FoodSyncService has no mutation client configured")

        _logger.info("Uploading documents, this may take a minute...")
        try:
            response = await self.mutation_client.mutate(batch.to_payload())
        except (httpx.HTTPError, ValueError) as exc:
            _logger.exception("Upload of %s foods failed", len(batch))
            return SubmissionResult(submitted=0, error=_describe_error(exc))

        _logger.info("Uploaded %s foods", len(batch))
        return SubmissionResult(submitted=len(batch), response=response)


def _describe_error(exc: Exception) -> str:
    """Describe a submission error, including the HTTP status if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return f"HTTP {status_code}: {exc}"
    return str(exc) or type(exc).__name__
