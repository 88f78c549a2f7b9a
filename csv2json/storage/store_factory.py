import logging
from typing import Any, Dict, Optional

from csv2json.exceptions import ConfigurationError, StorageError
from csv2json.storage.abstract_store import AbstractRecordStore
from csv2json.storage.memory_store import MemoryRecordStore
from csv2json.storage.sql_store import SQLRecordStore
from csv2json.storage.store_port import StorePort, Unconfigured

logger = logging.getLogger(__name__)

DISABLED_TYPES = ('none', 'disabled', '')


class StoreFactory:
    """
    Factory for creating record stores

    Creates and configures the appropriate store based on the 'storage'
    section of the configuration.
    """

    _store_classes = {
        'memory': MemoryRecordStore,
        'sqlite': SQLRecordStore,
        'postgresql': SQLRecordStore,
        'postgres': SQLRecordStore,
    }

    @classmethod
    def register_store(cls, name: str, store_class: type) -> None:
        """
        Register a new store backend

        Args:
            name: Name of the store type
            store_class: Class implementing AbstractRecordStore
        """
        if not issubclass(store_class, AbstractRecordStore):
            raise ValueError("Store class must inherit from AbstractRecordStore")
        cls._store_classes[name.lower()] = store_class

    @classmethod
    def get_available_stores(cls) -> Dict[str, type]:
        """Get all registered store types"""
        return cls._store_classes.copy()

    @classmethod
    def create_store(cls, config: Dict[str, Any]) -> AbstractRecordStore:
        """
        Create a store based on configuration

        Args:
            config: Storage configuration dictionary with at least 'type'

        Returns:
            Store instance (not yet connected)

        Raises:
            ConfigurationError: If the store type is unknown
        """
        store_type = str(config.get('type', 'none')).lower()
        if store_type not in cls._store_classes:
            raise ConfigurationError(f"Unknown storage type: {store_type}")
        return cls._store_classes[store_type](config)

    @classmethod
    def create_port(cls, config: Optional[Dict[str, Any]]) -> StorePort:
        """
        Create a store port from configuration

        Returns Unconfigured when storage is disabled. When the backend cannot
        be reached, logs a warning and returns Unconfigured unless
        'required' is set, in which case the StorageError propagates.
        """
        config = config or {}
        store_type = str(config.get('type', 'none')).lower()
        if store_type in DISABLED_TYPES:
            logger.info("Storage disabled - running in convert-only mode")
            return Unconfigured()

        store = cls.create_store(config)
        try:
            store.ping()
            if config.get('initialize_schema', True):
                store.initialize()
        except StorageError as e:
            store.close()
            if config.get('required', False):
                raise
            logger.warning(f"Failed to connect to {store_type} storage: {e}")
            logger.warning("Running without database persistence - CSV conversion will still work")
            return Unconfigured()

        logger.info(f"Using {store_type} storage")
        return StorePort.of(store)
