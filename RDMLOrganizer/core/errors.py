#!/usr/bin/env python3
"""
Exception taxonomy for RDMLOrganizer.

Schema-level errors are raised by entity constructors, structural errors by
the parser, reference errors by ``RDML.validate()`` and the serializer, and
column errors by fluorescence injection.  Everything derives from
``RDMLError`` so callers can catch the whole family at once.
"""

from typing import Iterable, List, NamedTuple, Optional


class RDMLWarning(UserWarning):
    """Category for every recoverable condition (dropped elements, dangling refs …)."""


class RDMLError(Exception):
    """Base class for all errors raised by the library."""


# ---------------------------------------------------------------------------
# schema level
# ---------------------------------------------------------------------------

class SchemaError(RDMLError):
    """A value does not satisfy the schema rule of its field."""

    def __init__(self, type_name: str, field_name: str, message: str):
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(f"{type_name}.{field_name}: {message}")


class TypeMismatch(SchemaError, TypeError):
    """Wrong Python type or value outside the enumerated set."""


class MissingRequiredField(SchemaError):
    """A mandatory field was omitted."""

    def __init__(self, type_name: str, field_name: str):
        super().__init__(type_name, field_name, "required field is missing")


class InvalidValueError(SchemaError, ValueError):
    """Right type, but the value breaks a constraint (range, ordering …)."""


# ---------------------------------------------------------------------------
# structural
# ---------------------------------------------------------------------------

class ParseError(RDMLError):
    """The markup could not be mapped onto the schema."""

    def __init__(self, path: str, rule: str):
        self.path = path
        self.rule = rule
        super().__init__(f"{path}: {rule}")


class UnsupportedVersionError(ParseError):
    """The root ``version`` attribute names an RDML version we do not read."""


# ---------------------------------------------------------------------------
# cross references
# ---------------------------------------------------------------------------

class DanglingReference(NamedTuple):
    path: str
    collection: str
    id: str

    def __str__(self):
        return f"{self.path} -> {self.collection} '{self.id}'"


def _format_references(references: List[DanglingReference]) -> str:
    return "\n".join(f"  - {ref}" for ref in references)


class DanglingReferenceError(RDMLError):
    """One or more cross references do not resolve (all of them are listed)."""

    def __init__(self, references: Iterable[DanglingReference]):
        self.references = list(references)
        super().__init__(
            f"{len(self.references)} unresolved reference(s):\n"
            + _format_references(self.references)
        )


class ValidationError(RDMLError):
    """Serialization refused because the tree does not validate."""

    def __init__(self, message: str,
                 references: Optional[Iterable[DanglingReference]] = None):
        self.references = list(references or [])
        if self.references:
            message += "\n" + _format_references(self.references)
        super().__init__(message)


# ---------------------------------------------------------------------------
# tabular
# ---------------------------------------------------------------------------

class UnknownColumnError(RDMLError, KeyError):
    """Matrix columns with no matching ``fdata.name`` in the descriptor table."""

    def __init__(self, columns: Iterable[str]):
        self.columns = list(columns)
        super().__init__(
            "No descriptor row for column(s): "
            + ", ".join(repr(c) for c in self.columns)
        )

    def __str__(self):
        # KeyError.__str__ would repr() the message
        return self.args[0]


class DuplicateNameError(RDMLError, ValueError):
    """The descriptor table maps one ``fdata.name`` to several rows."""


class DuplicatePointError(RDMLError, ValueError):
    """A curve repeats an x value, so it has no place in a wide matrix."""

    def __init__(self, name: str, values: Iterable[float]):
        self.name = name
        self.values = list(values)
        super().__init__(
            f"{name!r}: repeated x value(s) {self.values}; use long_table=True "
            "or remove the duplicate points")
