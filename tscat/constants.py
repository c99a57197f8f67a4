"""String constants used across tscat modules."""


class TranslationType:
    """Values of the ``type`` attribute on ``<translation>``."""

    FINISHED = ""
    UNFINISHED = "unfinished"
    VANISHED = "vanished"
    OBSOLETE = "obsolete"


class Severity:
    """Validation issue severities, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCode:
    """Validation issue identifiers."""

    DUPLICATE_KEY = "duplicate-key"
    NUMERUS_COUNT = "numerus-count"
    EMPTY_FINISHED = "empty-finished"
    UNFINISHED_TRANSLATED = "unfinished-translated"
    LOCATION = "location"
    PLACEHOLDERS = "placeholders"
    ACCELERATOR = "accelerator"
    PUNCTUATION = "punctuation"


class LocationMode:
    """How ``<location>`` elements are written."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    NONE = "none"


SEVERITY_ORDER = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}

OBSOLETE_TYPES = frozenset({TranslationType.VANISHED, TranslationType.OBSOLETE})
KNOWN_TYPES = frozenset(
    {
        TranslationType.UNFINISHED,
        TranslationType.VANISHED,
        TranslationType.OBSOLETE,
    }
)

DEFAULT_TS_VERSION = "2.1"
DEFAULT_PLACEHOLDER_PATTERNS = [r"%\d+", r"%n"]
CONFIG_FILENAME = "tscat.json"
