"""
Document tree, markup I/O and tabular views.

Only the error taxonomy is imported here; ``document``, ``parser``,
``serializer``, ``table`` and ``fdata`` are imported by their users.
"""

from RDMLOrganizer.core.errors import (
    DanglingReference,
    DanglingReferenceError,
    DuplicateNameError,
    DuplicatePointError,
    InvalidValueError,
    MissingRequiredField,
    ParseError,
    RDMLError,
    RDMLWarning,
    SchemaError,
    TypeMismatch,
    UnknownColumnError,
    UnsupportedVersionError,
    ValidationError,
)
