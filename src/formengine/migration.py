"""Schema document versioning and migration.

Stored documents are checked with ``validate_structure`` first, then
brought up to ``SCHEMA_VERSION`` by ``migrate``, and only then parsed into
a ``FormSchema``. ``load_schema`` runs the three steps in that order.
"""

import copy
import logging
from typing import Any, Callable

from .consts import SCHEMA_VERSION
from .errors import StructuralError
from .form_schema import FormSchema

logger = logging.getLogger(__name__)

Document = dict[str, Any]

# Version-gated transforms: MIGRATIONS[old_version] upgrades a document from
# old_version to the next version and sets its "version" key accordingly.
# migrate() applies them in sequence until no transform matches.
MIGRATIONS: dict[str, Callable[[Document], Document]] = {}

_REQUIRED_KEYS: tuple[tuple[str, type, str], ...] = (
    ("version", str, "a version string"),
    ("id", str, "an id string"),
    ("metadata", dict, "a metadata object"),
    ("fields", list, "a fields array"),
    ("settings", dict, "a settings object"),
)


def validate_structure(candidate: Any) -> bool:
    """Check the top-level shape of a stored form document.

    Returns True for a structurally valid document.

    Raises:
        StructuralError: the candidate is not an object, or a required key
            is missing, empty or of the wrong type
    """
    if not isinstance(candidate, dict):
        raise StructuralError("Schema must be an object")

    for key, expected_type, description in _REQUIRED_KEYS:
        value = candidate.get(key)
        if not isinstance(value, expected_type):
            raise StructuralError(f"Schema must have {description}")
        if expected_type is str and not value:
            raise StructuralError(f"Schema must have {description}")

    return True


def migrate(document: Document) -> Document:
    """Bring a structurally valid document up to ``SCHEMA_VERSION``.

    Returns a new document; the input is not modified. Idempotent:
    migrating an already current document only re-stamps its version.
    """
    migrated = copy.deepcopy(document)

    seen: set[str] = set()
    while migrated["version"] in MIGRATIONS and migrated["version"] not in seen:
        version = migrated["version"]
        seen.add(version)
        migrated = MIGRATIONS[version](migrated)
        logger.info(f"Migrated form {migrated['id']} from {version} to {migrated['version']}")

    migrated["version"] = SCHEMA_VERSION
    return migrated


def load_schema(document: Any) -> FormSchema:
    """Structure check, migrate and parse a stored document.

    Raises:
        StructuralError: the document fails ``validate_structure``
        pydantic.ValidationError: the migrated document does not parse
    """
    validate_structure(document)
    return FormSchema.model_validate(migrate(document))
