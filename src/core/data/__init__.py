"""Report data model."""

from src.core.data.report import (
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

__all__ = [
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
]
