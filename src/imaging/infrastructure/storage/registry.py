"""Registry of the image stores running in this process."""

from collections.abc import Iterator

from aws_lambda_powertools import Logger

from imaging.models.errors import DuplicateStoreError, StoreNotRegisteredError
from imaging.repositories.storage_repository import ImageStore

logger = Logger(UTC=True)


class StoreRegistry:
    """Maps store names to stores.

    Stores are registered during startup and the registry is then frozen;
    after that it is read-only and safe to share between threads.
    """

    def __init__(self) -> None:
        self._stores: dict[str, ImageStore] = {}
        self._frozen = False

    def register(self, store: ImageStore) -> None:
        """Add a store.

        Raises:
            DuplicateStoreError: If a store with the same name is registered
            RuntimeError: If the registry is frozen
        """
        if self._frozen:
            raise RuntimeError("store registry is frozen")

        if store.name in self._stores:
            raise DuplicateStoreError(
                message=f"A store with the name {store.name} is already registered",
                details={"store": store.name},
            )

        self._stores[store.name] = store
        logger.debug("Store registered", extra={"store": store.name})

    def freeze(self) -> "StoreRegistry":
        self._frozen = True
        return self

    def match(self, name: str) -> ImageStore:
        """Return the store registered under name.

        Raises:
            StoreNotRegisteredError: If no such store is running
        """
        store = self._stores.get(name)
        if store is None:
            logger.error("Image store not registered", extra={"store": name})
            raise StoreNotRegisteredError(details={"store": name})
        return store

    def names(self) -> list[str]:
        return list(self._stores)

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def __iter__(self) -> Iterator[ImageStore]:
        return iter(self._stores.values())

    def __len__(self) -> int:
        return len(self._stores)
