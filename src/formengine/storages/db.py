import logging
from typing import Optional

from peewee import PeeweeException
from pydantic import ValidationError

from formengine.errors import StorageException, StructuralError
from formengine.form_schema import FormSchema, SavedForm
from formengine.migration import load_schema

logger = logging.getLogger(__name__)


class DBStorage:
    """Stores form documents in the ``forms`` table.

    Each row carries an update counter; ``save`` with ``expected_version``
    refuses to overwrite a row another writer has updated since.
    """

    def save(self, schema: FormSchema, expected_version: Optional[int] = None) -> SavedForm:
        from formengine.models import Form, database_proxy

        document = schema.to_document()
        try:
            with database_proxy.atomic():
                record = Form.get_or_none(Form.form_id == schema.id)
                if record is None:
                    record = Form.create(
                        form_id=schema.id,
                        name=schema.metadata.title,
                        schema=document,
                    )
                else:
                    if expected_version is not None and record.version != expected_version:
                        raise StorageException(
                            f"Form {schema.id} was modified concurrently: "
                            f"expected version {expected_version}, found {record.version}"
                        )
                    record.name = schema.metadata.title
                    record.schema = document
                    record.save()
        except PeeweeException as e:
            logger.error(f"Failed to save form {schema.id}: {e}")
            raise StorageException(f"Failed to save form {schema.id}: {e}") from e

        logger.info(f"Form saved: {schema.id} (version={record.version})")
        return SavedForm(id=schema.id, form=schema, saved_at=record.updated_at)

    def version_of(self, form_id: str) -> Optional[int]:
        from formengine.models import Form

        record = Form.get_or_none(Form.form_id == form_id)
        return record.version if record else None

    def load(self, form_id: str) -> Optional[FormSchema]:
        """Load and migrate a form; missing or corrupt rows give None."""
        from formengine.models import Form

        record = Form.get_or_none(Form.form_id == form_id)
        if record is None:
            return None

        try:
            return load_schema(record.schema)
        except (StructuralError, ValidationError) as e:
            logger.error(f"Failed to load form {form_id}: {e}")
            return None

    def list(self) -> list[SavedForm]:
        from formengine.models import Form

        forms: list[SavedForm] = []
        for record in Form.select().order_by(Form.updated_at.desc()):
            try:
                forms.append(
                    SavedForm(
                        id=record.form_id,
                        form=load_schema(record.schema),
                        saved_at=record.updated_at,
                    )
                )
            except (StructuralError, ValidationError) as e:
                logger.warning(f"Skipping corrupt form row {record.form_id}: {e}")
        return forms

    def delete(self, form_id: str) -> None:
        from formengine.models import Form

        try:
            deleted = Form.delete().where(Form.form_id == form_id).execute()
        except PeeweeException as e:
            logger.error(f"Failed to delete form {form_id}: {e}")
            raise StorageException(f"Failed to delete form {form_id}: {e}") from e
        logger.info(f"Form deleted: {form_id} (rows={deleted})")
