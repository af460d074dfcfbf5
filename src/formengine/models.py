"""Peewee ORM model definitions"""

from datetime import datetime
from zoneinfo import ZoneInfo

from peewee import CharField, DatabaseProxy, DateTimeField, IntegerField, Model
from playhouse.shortcuts import ThreadSafeDatabaseMetadata
from playhouse.sqlite_ext import JSONField

UTC = ZoneInfo("UTC")

# Use DatabaseProxy for deferred database binding
database_proxy = DatabaseProxy()


class BaseModel(Model):
    """Base model class - supports thread-safe metadata"""

    class Meta:
        database = database_proxy
        model_metadata_class = ThreadSafeDatabaseMetadata


class Form(BaseModel):
    """Stored form schema document.

    ``version`` is the optimistic locking counter, incremented on every
    update. It is unrelated to the schema document's own ``version`` tag.
    """

    form_id = CharField(unique=True)
    name = CharField(default="")
    schema = JSONField()
    version = IntegerField(default=1)
    created_at = DateTimeField(default=lambda: datetime.now(UTC))
    updated_at = DateTimeField(default=lambda: datetime.now(UTC), index=True)

    class Meta:
        table_name = "forms"

    def save(self, *args, **kwargs):
        """Override save method to auto-update updated_at and bump version"""
        if self._pk is not None:
            self.updated_at = datetime.now(UTC)
            self.version += 1
        return super().save(*args, **kwargs)
