import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from formengine.consts import FORM_FILE_PREFIX, FORM_FILE_SUFFIX, FORMS_INDEX_FILE
from formengine.errors import StorageException, StructuralError
from formengine.form_schema import FormSchema, SavedForm
from formengine.migration import load_schema
from formengine.utils import get_now

logger = logging.getLogger(__name__)


class FileStorage:
    """Stores each form as a JSON document next to a ``forms.json`` index.

    The index keeps one ``{id, schema, savedAt}`` entry per form in the
    order forms were first saved.
    """

    def __init__(
        self, directory: str | Path, *, clock: Callable[[], datetime] = get_now
    ) -> None:
        self._directory = Path(directory)
        self._clock = clock

    @property
    def index_path(self) -> Path:
        return self._directory / FORMS_INDEX_FILE

    def form_path(self, form_id: str) -> Path:
        if not form_id or "/" in form_id or "\\" in form_id or form_id in (".", ".."):
            raise StorageException(f"Invalid form id: {form_id!r}")
        return self._directory / f"{FORM_FILE_PREFIX}{form_id}{FORM_FILE_SUFFIX}"

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageException(f"Failed to write {path}: {e}") from e

    def _read_index(self) -> list[dict[str, Any]]:
        if not self.index_path.exists():
            return []
        try:
            entries = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read form index {self.index_path}: {e}")
            return []
        if not isinstance(entries, list):
            logger.error(f"Form index {self.index_path} is not a list, ignoring it")
            return []
        return [e for e in entries if isinstance(e, dict)]

    def save(self, schema: FormSchema) -> SavedForm:
        document = schema.to_document()
        self._write_json(self.form_path(schema.id), document)

        saved = SavedForm(id=schema.id, form=schema, saved_at=self._clock())
        entry = saved.model_dump(by_alias=True, mode="json", exclude_none=True)

        entries = self._read_index()
        for i, existing in enumerate(entries):
            if existing.get("id") == schema.id:
                entries[i] = entry
                break
        else:
            entries.append(entry)
        self._write_json(self.index_path, entries)

        logger.info(f"Form saved: {schema.id} ({self.form_path(schema.id)})")
        return saved

    def load(self, form_id: str) -> Optional[FormSchema]:
        """Load and migrate a form; missing or corrupt documents give None."""
        path = self.form_path(form_id)
        if not path.exists():
            return None

        try:
            document = json.loads(path.read_text(encoding="utf-8"))
            return load_schema(document)
        except (OSError, json.JSONDecodeError, StructuralError, ValidationError) as e:
            logger.error(f"Failed to load form {form_id}: {e}")
            return None

    def list(self) -> list[SavedForm]:
        forms: list[SavedForm] = []
        for entry in self._read_index():
            try:
                forms.append(
                    SavedForm(
                        id=entry["id"],
                        form=load_schema(entry.get("schema")),
                        saved_at=entry["savedAt"],
                    )
                )
            except (KeyError, StructuralError, ValidationError) as e:
                logger.warning(f"Skipping corrupt index entry {entry.get('id')!r}: {e}")
        return forms

    def delete(self, form_id: str) -> None:
        path = self.form_path(form_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise StorageException(f"Failed to delete form {form_id}: {e}") from e

        entries = [e for e in self._read_index() if e.get("id") != form_id]
        self._write_json(self.index_path, entries)
        logger.info(f"Form deleted: {form_id}")
