"""Core utilities and abstractions for the report pipeline."""

# Error handling
from src.core.errors import (
    ConversionError,
    ExternalAPIError,
    InvalidVersionError,
    PipelineError,
    ReconciliationFailure,
    SymbolExtractionError,
)

# Core components
from src.core.context import FixContext, FixOptions

# Data model
from src.core.data import (
    CVEMeta,
    Module,
    Note,
    NoteType,
    Package,
    Placeholder,
    Reference,
    ReferenceType,
    Report,
    VersionRange,
)

# Utilities
from src.core.utils.text import trim_whitespace
from src.core.utils.timestamps import format_rfc3339, parse_timestamp, utc_now
from src.core.versions import semver_for_go_version

__all__ = [
    # Error classes
    "PipelineError",
    "ConversionError",
    "InvalidVersionError",
    "SymbolExtractionError",
    "ExternalAPIError",
    "ReconciliationFailure",
    # Core components
    "FixOptions",
    "FixContext",
    # Data model
    "CVEMeta",
    "Module",
    "Note",
    "NoteType",
    "Package",
    "Placeholder",
    "Reference",
    "ReferenceType",
    "Report",
    "VersionRange",
    # Utilities
    "trim_whitespace",
    "format_rfc3339",
    "parse_timestamp",
    "utc_now",
    "semver_for_go_version",
]
