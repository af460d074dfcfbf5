"""Constants for formengine"""

# ==================== Schema ====================
SCHEMA_VERSION = "1.0.0"

DEFAULT_FORM_TITLE = "Untitled Form"
DEFAULT_SUBMIT_BUTTON_TEXT = "Submit"
DEFAULT_SUCCESS_MESSAGE = "Thank you! Your form has been submitted successfully."

COPY_LABEL_SUFFIX = " (Copy)"

# ==================== File Paths ====================
DATA_DIR_DEFAULT = "data"
FORMS_DIR_DEFAULT = "data/forms"
DATABASE_PATH = "data/formengine.db"
LOG_FILE_DEFAULT = "data/formengine.log"

# ==================== File Storage ====================
FORMS_INDEX_FILE = "forms.json"
FORM_FILE_PREFIX = "form-"
FORM_FILE_SUFFIX = ".json"

# ==================== Validation ====================
EMAIL_PATTERN = r"[^\s@]+@[^\s@]+\.[^\s@]+"

BYTES_PER_MB = 1024 * 1024


class ErrorMessages:
    """User-facing validation messages"""

    REQUIRED = "This field is required"
    INVALID_EMAIL = "Please enter a valid email address"
    INVALID_URL = "Please enter a valid URL"
    PATTERN_MISMATCH = "Invalid format"
    INVALID_FILE_TYPE = "Invalid file type"

    @staticmethod
    def min_length(min_length: int) -> str:
        return f"Minimum length is {min_length} characters"

    @staticmethod
    def max_length(max_length: int) -> str:
        return f"Maximum length is {max_length} characters"

    @staticmethod
    def min_value(min_value: float) -> str:
        return f"Minimum value is {min_value}"

    @staticmethod
    def max_value(max_value: float) -> str:
        return f"Maximum value is {max_value}"

    @staticmethod
    def file_too_large(max_size_mb: float) -> str:
        return f"File size must be less than {max_size_mb:g}MB"

    @staticmethod
    def min_selections(count: int) -> str:
        return f"Please select at least {count} option(s)"

    @staticmethod
    def max_selections(count: int) -> str:
        return f"Please select at most {count} option(s)"

# ==================== Database Configuration ====================
DB_MAX_CONNECTIONS = 20
DB_STALE_TIMEOUT = 300  # 5 minutes
DB_JOURNAL_MODE = "wal"
DB_SYNCHRONOUS = "NORMAL"
DB_BUSY_TIMEOUT = 5000  # 5 seconds

DB_PRAGMAS = {
    "journal_mode": DB_JOURNAL_MODE,
    "synchronous": DB_SYNCHRONOUS,
    "busy_timeout": DB_BUSY_TIMEOUT,
    "foreign_keys": 1,
}
