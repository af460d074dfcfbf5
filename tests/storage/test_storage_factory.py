from unittest.mock import Mock, patch

import pytest

from formengine.enums import StorageType
from formengine.errors import ConfigException
from formengine.storages import get_storage
from formengine.storages.db import DBStorage
from formengine.storages.file import FileStorage


def test_get_storage_returns_file_storage(tmp_path):
    config = Mock()
    config.storage.type = StorageType.FILE
    config.storage.directory = str(tmp_path)

    storage = get_storage(config=config)

    assert isinstance(storage, FileStorage)
    assert storage.index_path.parent == tmp_path


def test_get_storage_initializes_database_for_db():
    config = Mock()
    config.storage.type = StorageType.DB
    config.storage.database_path = "/tmp/forms.db"

    with patch("formengine.db.init_db") as init_db, patch(
        "formengine.db.create_tables"
    ) as create_tables:
        storage = get_storage(config=config)

    assert isinstance(storage, DBStorage)
    init_db.assert_called_once_with("/tmp/forms.db")
    create_tables.assert_called_once_with()


def test_get_storage_rejects_unknown_type():
    config = Mock()
    config.storage.type = "s3"

    with pytest.raises(ConfigException, match="Unknown storage type"):
        get_storage(config=config)
