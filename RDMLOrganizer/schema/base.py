#!/usr/bin/env python3
"""
SchemaType – base class for every RDML entity.

Contract
--------
* Subclasses are ``@dataclass``es whose schema fields are declared with
  ``element(...)``.  Declaration order is the XML child order.
* Construction validates every field: wrong type / enum value raises
  ``TypeMismatch``, an omitted mandatory field ``MissingRequiredField``.
  Cross-field constraints live in ``_check()``.
* ``to_xml(tag)`` / ``from_xml(node)`` convert to and from an lxml element
  and are inverses for anything the constructor accepts.
* ``to_dict()`` / ``from_dict()`` give the JSON-safe plain-data view.

Absent optional values are ``None``.  Zero, ``False`` and ``""`` are real
values and are always written out.
"""

import copy
import numbers
import warnings
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
from lxml import etree

from RDMLOrganizer.core.defaults import RDML_NAMESPACE
from RDMLOrganizer.core.errors import (
    MissingRequiredField,
    ParseError,
    RDMLWarning,
    SchemaError,
    TypeMismatch,
)


# ---------------------------------------------------------------------------
# field declaration
# ---------------------------------------------------------------------------

def element(kind, required: bool = False, choices: Optional[Tuple[str, ...]] = None,
            many: bool = False, keyed: bool = False, tag: Optional[str] = None,
            attr: bool = False, default=None):
    """
    Declare a schema field.

    Parameters
    ----------
    kind : type
        ``str``, ``int``, ``float``, ``bool`` or a ``SchemaType`` subclass.
    required : bool
        Omitting the field raises ``MissingRequiredField``.
    choices : tuple of str, optional
        Enumerated value set for string fields.
    many : bool
        Ordered list of values (repeated XML element).
    keyed : bool
        ``IdMap`` of child entities keyed by ``entity.key()``.
    tag : str, optional
        XML name, when it is not the camelCase form of the field name.
    attr : bool
        Stored as an XML attribute instead of a child element.
    default : optional
        Value used when the field is omitted (schema defaults only).
    """
    metadata = {
        'kind': kind,
        'required': required,
        'choices': choices,
        'many': many or keyed,
        'keyed': keyed,
        'tag': tag,
        'attr': attr,
    }
    if keyed:
        return field(default_factory=lambda: IdMap(), metadata=metadata)
    if many:
        return field(default_factory=list, metadata=metadata)
    return field(default=default, metadata=metadata)


def schema_fields(cls) -> List:
    """Dataclass fields declared with ``element()``, in schema order."""
    return [f for f in fields(cls) if 'kind' in f.metadata]


def field_tag(f) -> str:
    if f.metadata['tag']:
        return f.metadata['tag']
    head, *rest = f.name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def _is_schema_kind(kind) -> bool:
    return isinstance(kind, type) and issubclass(kind, SchemaType)


# ---------------------------------------------------------------------------
# text codecs
# ---------------------------------------------------------------------------

def qname(tag: str) -> str:
    """Namespace-qualified RDML element name."""
    return f"{{{RDML_NAMESPACE}}}{tag}"


def split_tag(tag: str) -> Tuple[Optional[str], str]:
    """``'{ns}local'`` -> ``('ns', 'local')``; bare names have ``None`` namespace."""
    if tag.startswith('{'):
        ns, local = tag[1:].split('}', 1)
        return ns, local
    return None, tag


def format_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)  # shortest string that reads back to the same float
    return str(value)


def parse_text(kind, text: Optional[str]):
    """Convert element text to *kind*; raises ValueError on bad input."""
    if kind is str:
        return text if text is not None else ""
    text = (text or "").strip()
    if kind is bool:
        lowered = text.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(f"not a boolean: {text!r}")
    if kind is int:
        return int(text)
    if kind is float:
        return float(text)
    raise ValueError(f"no text codec for {kind!r}")


# ---------------------------------------------------------------------------
# value checks
# ---------------------------------------------------------------------------

def _kind_name(kind) -> str:
    return getattr(kind, '__name__', repr(kind))


def check_value(type_name: str, field_name: str, meta: dict, value):
    """Validate (and lightly coerce) one scalar or entity value."""
    kind = meta['kind']
    if kind is bool:
        if isinstance(value, (bool, np.bool_)):
            return bool(value)
    elif kind is int:
        if isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_)):
            return int(value)
    elif kind is float:
        if isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_)):
            return float(value)
    elif kind is str:
        if isinstance(value, str):
            choices = meta.get('choices')
            if choices and value not in choices:
                raise TypeMismatch(type_name, field_name,
                                   f"{value!r} is not one of {', '.join(choices)}")
            return value
    elif issubclass(kind, IdReference) and isinstance(value, str):
        return kind(value)
    elif isinstance(value, kind):
        return value
    raise TypeMismatch(type_name, field_name,
                       f"expected {_kind_name(kind)}, got {type(value).__name__} {value!r}")


def check_field(type_name: str, field_name: str, meta: dict, value):
    """Validate a whole field value (scalar, list or keyed map)."""
    if meta['many']:
        if value is None:
            items = []
        elif isinstance(value, Mapping):
            items = list(value.values())
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            raise TypeMismatch(type_name, field_name,
                               f"expected a list of {_kind_name(meta['kind'])}, "
                               f"got {type(value).__name__}")
        checked = [check_value(type_name, field_name, meta, item) for item in items]
        if meta['required'] and not checked:
            raise MissingRequiredField(type_name, field_name)
        return IdMap(checked) if meta['keyed'] else checked

    if value is None:
        if meta['required']:
            raise MissingRequiredField(type_name, field_name)
        return None
    return check_value(type_name, field_name, meta, value)


# ---------------------------------------------------------------------------
# IdMap
# ---------------------------------------------------------------------------

class IdMap(MutableMapping):
    """
    Insertion-ordered mapping of entities keyed by ``entity.key()``.

    Re-adding an existing key replaces the entity in place (last write
    wins, position kept); new keys are appended.  Equality is
    order-sensitive.
    """

    def __init__(self, items: Iterable = ()):
        self._items: Dict[Any, Any] = {}
        for item in items:
            self.add(item)

    def add(self, item):
        """Insert *item* under its own key and return it."""
        self._items[item.key()] = item
        return item

    def __getitem__(self, key):
        return self._items[key]

    def __setitem__(self, key, item):
        if item.key() != key:
            raise ValueError(f"key {key!r} does not match entity key {item.key()!r}")
        self._items[key] = item

    def __delitem__(self, key):
        del self._items[key]

    def __iter__(self) -> Iterator:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, IdMap):
            return list(self._items.items()) == list(other._items.items())
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"IdMap({list(self._items.values())!r})"


# ---------------------------------------------------------------------------
# SchemaType
# ---------------------------------------------------------------------------

class SchemaType:
    """Abstract base for all RDML entities (see module docstring)."""

    def __post_init__(self):
        # foreign-namespace child elements, re-emitted verbatim on write
        self._extensions: List[etree._Element] = []
        type_name = type(self).__name__
        for f in schema_fields(self):
            setattr(self, f.name,
                    check_field(type_name, f.name, f.metadata, getattr(self, f.name)))
        self._check()

    def _check(self):
        """Cross-field constraints; subclasses raise SchemaError subclasses."""

    def key(self):
        """Key under which the entity is stored in its owning IdMap."""
        return self.id

    def path_label(self, tag: str) -> str:
        return f"{tag}[@id='{self.key()}']"

    # ------------------------------------------------------------------
    # markup
    # ------------------------------------------------------------------

    def to_xml(self, tag: str) -> etree._Element:
        """Build the element ``<tag>`` for this entity."""
        node = etree.Element(qname(tag))
        for f in schema_fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            child_tag = field_tag(f)
            if f.metadata['attr']:
                node.set(child_tag, format_text(value))
                continue
            if f.metadata['keyed']:
                items = list(value.values())
            elif f.metadata['many']:
                items = value
            else:
                items = [value]
            for item in items:
                if isinstance(item, SchemaType):
                    node.append(item.to_xml(child_tag))
                else:
                    etree.SubElement(node, qname(child_tag)).text = format_text(item)
        self._extra_xml(node)
        for extension in self._extensions:
            node.append(copy.deepcopy(extension))
        return node

    def _extra_xml(self, node: etree._Element):
        """Hook for children that are not plain schema fields."""

    @classmethod
    def from_xml(cls, node: etree._Element, path: Optional[str] = None):
        """
        Build an entity from *node*, children first.

        Foreign-namespace children are kept as extensions; unknown RDML
        children and attributes are dropped with an ``RDMLWarning``.
        Schema violations raise ``ParseError`` naming *path*.
        """
        if path is None:
            path = "/" + split_tag(node.tag)[1]
        by_tag = {field_tag(f): f for f in schema_fields(cls)}
        kwargs: Dict[str, Any] = {}
        extensions = []

        for name, text in node.attrib.items():
            f = by_tag.get(name)
            if f is None or not f.metadata['attr']:
                if not name.startswith('{'):
                    warnings.warn(f"{path}: unknown attribute '{name}' dropped", RDMLWarning)
                continue
            kwargs[f.name] = _parse_leaf(cls, f, text, f"{path}/@{name}")

        for child in node:
            if not isinstance(child.tag, str):
                continue  # comments, processing instructions
            ns, tag = split_tag(child.tag)
            if ns not in (None, RDML_NAMESPACE):
                extensions.append(child)
                continue
            child_id = child.get('id')
            child_path = f"{path}/{tag}" + (f"[@id='{child_id}']" if child_id else "")
            if cls._parse_extra(tag, child, child_path, kwargs):
                continue
            f = by_tag.get(tag)
            if f is None or f.metadata['attr']:
                warnings.warn(f"{child_path}: unknown element dropped", RDMLWarning)
                continue
            if _is_schema_kind(f.metadata['kind']):
                value = f.metadata['kind'].from_xml(child, child_path)
            else:
                value = _parse_leaf(cls, f, child.text, child_path)
            if f.metadata['many']:
                kwargs.setdefault(f.name, []).append(value)
            else:
                if f.name in kwargs:
                    warnings.warn(f"{child_path}: repeated element, last one kept", RDMLWarning)
                kwargs[f.name] = value

        try:
            obj = cls(**kwargs)
        except SchemaError as err:
            raise ParseError(path, str(err)) from err
        obj._extensions = [detached(e) for e in extensions]
        return obj

    @classmethod
    def _parse_extra(cls, tag: str, child: etree._Element, path: str,
                     kwargs: Dict[str, Any]) -> bool:
        """Hook: consume *child* into *kwargs* and return True, or return False."""
        return False

    # ------------------------------------------------------------------
    # plain data
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """JSON-safe dict; keyed maps become lists in insertion order."""
        data = {}
        for f in schema_fields(self):
            value = getattr(self, f.name)
            if f.metadata['keyed']:
                data[f.name] = [item.to_dict() for item in value.values()]
            elif f.metadata['many']:
                data[f.name] = [_plain(item) for item in value]
            else:
                data[f.name] = _plain(value)
        return data

    @classmethod
    def from_dict(cls, data: dict):
        kwargs = {}
        for f in schema_fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            kind = f.metadata['kind']
            if _is_schema_kind(kind) and value is not None:
                if f.metadata['many']:
                    value = [kind.from_dict(item) for item in value]
                else:
                    value = kind.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # cross references
    # ------------------------------------------------------------------

    def iter_references(self, path: str) -> Iterator[Tuple[str, 'IdReference']]:
        """Yield ``(path, reference)`` for every cross reference below this entity."""
        for f in schema_fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            tag = field_tag(f)
            if f.metadata['keyed']:
                items = [(f"{path}/{item.path_label(tag)}", item) for item in value.values()]
            elif f.metadata['many']:
                items = [(f"{path}/{tag}[{i}]", item) for i, item in enumerate(value, 1)]
            else:
                items = [(f"{path}/{tag}", value)]
            for item_path, item in items:
                if isinstance(item, IdReference):
                    yield item_path, item
                elif isinstance(item, SchemaType):
                    yield from item.iter_references(item_path)


def detached(node: etree._Element) -> etree._Element:
    """Copy of a foreign element without the whitespace tail of its old parent."""
    node = copy.deepcopy(node)
    node.tail = None
    return node


def _plain(value):
    return value.to_dict() if isinstance(value, SchemaType) else value


def _parse_leaf(cls, f, text: Optional[str], path: str):
    kind = f.metadata['kind']
    try:
        return check_value(cls.__name__, f.name, f.metadata, parse_text(kind, text))
    except ValueError as err:
        raise ParseError(path, f"expected {_kind_name(kind)}: {err}") from err
    except SchemaError as err:
        raise ParseError(path, str(err)) from err


# ---------------------------------------------------------------------------
# cross-reference handle
# ---------------------------------------------------------------------------

@dataclass
class IdReference(SchemaType):
    """
    Weak handle to an entity in a top-level collection of the document.

    Written as ``<tag id="..."/>``.  Subclasses fix ``collection``.
    """
    id: str = element(str, required=True, attr=True)

    collection: ClassVar[str] = ''

    def resolve(self, rdml):
        """Return the referenced entity from *rdml*, or None when it is missing."""
        return rdml.get(self.collection, self.id)
