"""
Application Wiring

Builds storage and services from an explicit Settings object. This is the
only place that decides which storage backend is used; everything else
receives its collaborators through constructors.
"""

from dataclasses import dataclass
from typing import Optional

from expense_tracker.config import Settings, get_settings
from expense_tracker.logs import get_logger
from expense_tracker.services import ExpenseService, IdentityService
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    InMemoryUserStorage,
    MongoExpenseStorage,
    MongoStoreClient,
    MongoUserStorage,
    UserStorageInterface,
)


logger = get_logger(__name__)


@dataclass
class AppComponents:
    """Everything a request handler needs, built once per application."""

    settings: Settings
    identity: IdentityService
    expenses: ExpenseService
    user_storage: UserStorageInterface
    expense_storage: ExpenseStorageInterface
    store_client: Optional[MongoStoreClient] = None

    async def check_storage(self) -> None:
        """Raises StoreUnavailableError when the store cannot be reached."""
        await self.expense_storage.ping()

    def close(self) -> None:
        if self.store_client is not None:
            self.store_client.close()


def create_app_components(
    settings: Optional[Settings] = None,
    connect: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration to use; defaults to the cached settings
        connect: For the Mongo backend, verify connectivity and create
                 indexes now rather than on first use

    Returns:
        The wired components
    """
    settings = settings or get_settings()
    store_client = None

    if settings.app.storage_backend == "memory":
        user_storage = InMemoryUserStorage()
        expense_storage = InMemoryExpenseStorage()
    else:
        store_client = MongoStoreClient(settings.mongo)
        if connect:
            try:
                store_client.connect()
            except Exception as e:
                logger.error("store_connection_failed", error=str(e))
                raise
        user_storage = MongoUserStorage(store_client)
        expense_storage = MongoExpenseStorage(store_client)

    if settings.auth.uses_default_secret and settings.app.app_environment != "development":
        logger.warning(
            "default_secret_key",
            environment=settings.app.app_environment,
        )

    logger.info(
        "components_created",
        storage_backend=settings.app.storage_backend,
        enforce_expense_ownership=settings.app.enforce_expense_ownership,
    )

    return AppComponents(
        settings=settings,
        identity=IdentityService(user_storage, settings.auth),
        expenses=ExpenseService(expense_storage),
        user_storage=user_storage,
        expense_storage=expense_storage,
        store_client=store_client,
    )
