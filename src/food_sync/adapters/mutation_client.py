"""Content store mutation API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

MUTATE_PATH = "/data/mutate/production"


class MutationClient(Protocol):
    """Interface for submitting mutation batches."""

    async def mutate(self, payload: dict[str, object]) -> object:
        """Submit a mutation payload and return the parsed JSON response."""


@dataclass
class HttpxMutationClient(MutationClient):
    """HTTPX-backed mutation client authenticated with a bearer token."""

    base_url: str
    token: str
    http_client: httpx.AsyncClient
    timeout: float = 60

    @classmethod
    def create(cls, base_url: str, token: str) -> "HttpxMutationClient":
        """Create a mutation client with a managed httpx session."""
        return cls(base_url=base_url, token=token, http_client=httpx.AsyncClient())

    @property
    def mutate_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{MUTATE_PATH}"

    async def mutate(self, payload: dict[str, object]) -> object:
        """Post a createOrReplace batch."""
        response = await self.http_client.post(
            self.mutate_url,
            headers={"Authorization": f"Bearer {self.token}"},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
