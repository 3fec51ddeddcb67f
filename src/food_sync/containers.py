"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass

from food_sync.adapters.mutation_client import HttpxMutationClient
from food_sync.adapters.sqlite_food_repository import SqliteFoodRepository
from food_sync.config import Settings
from food_sync.services.assembly import PortionSortKey
from food_sync.services.sync import FoodRepository, FoodSyncService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    sync_service: FoodSyncService
    open_repository: Callable[[], AbstractContextManager[FoodRepository]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, *, submit: bool = True
) -> AppContainer:
    """Create the default dependency container.

    Without ``submit`` no API credentials are needed and no HTTP client is made.
    """
    resolved_settings = settings or Settings()
    mutation_client: HttpxMutationClient | None = None
    if submit:
        api_uri, api_token = resolved_settings.require_api()
        mutation_client = HttpxMutationClient.create(base_url=api_uri, token=api_token)

    sync_service = FoodSyncService(
        mutation_client=mutation_client,
        sort_key=PortionSortKey(resolved_settings.portion_sort_key),
    )

    def open_repository() -> AbstractContextManager[FoodRepository]:
        return SqliteFoodRepository.open(resolved_settings.food_db_path)

    async def close_resources() -> None:
        if mutation_client is not None:
            await mutation_client.close()

    return AppContainer(
        settings=resolved_settings,
        sync_service=sync_service,
        open_repository=open_repository,
        close_resources=close_resources,
    )
