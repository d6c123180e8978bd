"""
Store Registry - Factory for document store backends.
Handles registration and selection of the configured backend.
"""

from typing import Dict, Type, List
import logging

from teamchat.store.base import DocumentStore


logger = logging.getLogger(__name__)


class StoreRegistry:
    """
    Registry for document store backends.

    Usage:
        # Register a backend
        @StoreRegistry.register("postgres")
        class PostgresDocumentStore(DocumentStore):
            ...

        # Get the shared backend instance
        store = StoreRegistry.get_store("postgres")
    """

    _backends: Dict[str, Type[DocumentStore]] = {}
    _instances: Dict[str, DocumentStore] = {}

    @classmethod
    def register(cls, name: str):
        """
        Decorator to register a backend.

        Args:
            name: Unique identifier for the backend (e.g., "postgres", "memory")
        """
        def decorator(store_class: Type[DocumentStore]):
            if name in cls._backends:
                logger.warning(f"Store backend '{name}' already registered. Overwriting.")

            cls._backends[name] = store_class
            logger.debug(f"Registered store backend: {name} -> {store_class.__name__}")
            return store_class

        return decorator

    @classmethod
    def get_store(cls, name: str) -> DocumentStore:
        """
        Get the shared store instance for a backend.

        Raises:
            ValueError: If backend not found
        """
        name = name.lower()

        if name not in cls._backends:
            available = ", ".join(cls._backends.keys())
            raise ValueError(
                f"Store backend '{name}' not found. Available backends: {available}"
            )

        if name not in cls._instances:
            cls._instances[name] = cls._backends[name]()

        return cls._instances[name]

    @classmethod
    def list_backends(cls) -> List[str]:
        return list(cls._backends.keys())
