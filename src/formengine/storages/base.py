from typing import Optional, Protocol

from formengine.form_schema import FormSchema, SavedForm


class Storage(Protocol):
    def save(self, schema: FormSchema) -> SavedForm: ...

    def load(self, form_id: str) -> Optional[FormSchema]: ...

    def list(self) -> list[SavedForm]: ...

    def delete(self, form_id: str) -> None: ...
