from formengine.config import Config
from formengine.enums import StorageType
from formengine.errors import ConfigException

from .base import Storage
from .db import DBStorage
from .file import FileStorage


def get_storage(*, config: Config) -> Storage:
    storage_type = config.storage.type

    if storage_type == StorageType.FILE:
        return FileStorage(config.storage.directory)

    if storage_type == StorageType.DB:
        from formengine.db import create_tables, init_db

        init_db(config.storage.database_path)
        create_tables()
        return DBStorage()

    raise ConfigException(f"Unknown storage type: {storage_type}")
