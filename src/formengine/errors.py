"""Exception definitions for formengine"""


class FormEngineException(Exception):
    """Base exception for all formengine errors.

    Per-field validation failures are never raised: they are returned as
    ``ValidationResult`` / ``FormValidationResult`` values. Everything that
    is raised derives from this class.
    """

    pass


class ConfigException(FormEngineException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (invalid values, unknown storage type)
    """

    pass


class StructuralError(FormEngineException):
    """Raised when a loaded form document fails the top-level shape check.

    Fatal to the load operation that hit it: the document must not be
    migrated or used. Storage adapters turn it into "not found".
    """

    pass


class FieldIndexError(FormEngineException, IndexError):
    """Raised when a reorder or insert position is out of bounds."""

    pass


class DuplicateFieldIdError(FormEngineException, ValueError):
    """Raised when an edit would give two fields the same id."""

    pass


class UnknownFieldTypeError(FormEngineException, KeyError):
    """Raised when the field type catalog has no entry for a type."""

    pass


class StorageException(FormEngineException):
    """Raised when a persistence adapter cannot complete an operation.

    Use this exception when:
    - A form document or the index cannot be written or removed
    - The database rejects an operation
    - An optimistic version check fails on save
    """

    pass
