#!/usr/bin/env python3
"""
RDML – the document tree.

Responsibilities
----------------
* Own the top-level collections (``ROOT_ORDER``), each an id-keyed IdMap.
* get / set / remove entities by collection and key.
* Merge another document (last write wins, atomic).
* Check that every cross reference resolves.
* Delegate to the parser, serializer and tabular helpers so the familiar
  ``RDML.load(...)`` / ``rdml.as_table()`` / ``rdml.save(...)`` API works.
"""

import copy
from pathlib import Path
from typing import Dict, List, Optional, Union

from RDMLOrganizer.core.defaults import DEFAULT_VERSION, ROOT_ORDER
from RDMLOrganizer.core.errors import DanglingReference, DanglingReferenceError, TypeMismatch
from RDMLOrganizer.schema import COLLECTION_REGISTRY, IdMap, SchemaType

# accepts both the xml tag and the attribute name of each collection
_COLLECTION_ATTRS: Dict[str, str] = {}
for _tag, _attr in ROOT_ORDER:
    _COLLECTION_ATTRS[_tag] = _attr
    _COLLECTION_ATTRS[_attr] = _attr
_COLLECTION_TAGS = {attr: tag for tag, attr in ROOT_ORDER}


class RDML:
    """
    In-memory RDML document.

    Attributes
    ----------
    version : str
        RDML version the document is written as.
    date_made, date_updated : str or None
        ISO timestamps from the root element.
    id, experimenter, documentation, dye, sample, target,
    thermal_cycling_conditions, experiment, dilutions, conditions : IdMap
        Top-level collections in schema order.

    Not thread safe: one instance per thread, or lock around it.
    """

    def __init__(self, version: str = DEFAULT_VERSION,
                 date_made: Optional[str] = None, date_updated: Optional[str] = None):
        self.version = version
        self.date_made = date_made
        self.date_updated = date_updated
        for _, attr in ROOT_ORDER:
            setattr(self, attr, IdMap())
        # foreign-namespace root children, re-emitted verbatim
        self._extensions = []

    # ------------------------------------------------------------------
    # collection access
    # ------------------------------------------------------------------

    def collection(self, name: str) -> IdMap:
        """The IdMap behind *name* (xml tag or attribute name)."""
        try:
            return getattr(self, _COLLECTION_ATTRS[name])
        except KeyError:
            raise ValueError(
                f"Unknown collection {name!r}. Choose from: "
                + ", ".join(tag for tag, _ in ROOT_ORDER)
            ) from None

    def get(self, collection: str, key, default=None):
        """Entity stored under *key*, or *default*."""
        return self.collection(collection).get(key, default)

    def set(self, collection: str, entity: SchemaType) -> SchemaType:
        """Insert or replace *entity* under its own key (last write wins)."""
        target = self.collection(collection)
        attr = _COLLECTION_ATTRS[collection]
        expected = COLLECTION_REGISTRY[_COLLECTION_TAGS[attr]]
        if not isinstance(entity, expected):
            raise TypeMismatch('RDML', attr,
                               f"expected {expected.__name__}, got {type(entity).__name__}")
        return target.add(entity)

    def remove(self, collection: str, key) -> SchemaType:
        """Remove and return the entity stored under *key* (KeyError if absent)."""
        return self.collection(collection).pop(key)

    def list_ids(self, collection: str) -> List:
        """Keys of *collection* in insertion order."""
        return list(self.collection(collection).keys())

    list = list_ids

    # ------------------------------------------------------------------
    # merge
    # ------------------------------------------------------------------

    def merge(self, other: 'RDML') -> 'RDML':
        """
        Merge *other* into this document.

        Entries of *other* replace same-key entries (keeping their
        position); new keys are appended.  Merged entries are copies.
        All collections are staged first and swapped in together, so a
        failure leaves this document untouched.
        """
        staged = {}
        for tag, attr in ROOT_ORDER:
            merged = IdMap(getattr(self, attr).values())
            for entity in getattr(other, attr).values():
                merged.add(copy.deepcopy(entity))
            staged[attr] = merged

        added = sum(len(staged[attr]) - len(getattr(self, attr)) for _, attr in ROOT_ORDER)
        for attr, merged in staged.items():
            setattr(self, attr, merged)
        print(f"✓ Merged document: {added} new entries")
        return self

    # ------------------------------------------------------------------
    # validation
    # ------------------------------------------------------------------

    def dangling_references(self) -> List[DanglingReference]:
        """Every cross reference that does not resolve, in document order."""
        dangling = []
        for tag, attr in ROOT_ORDER:
            for entity in getattr(self, attr).values():
                base = f"/rdml/{entity.path_label(tag)}"
                for path, ref in entity.iter_references(base):
                    if ref.resolve(self) is None:
                        dangling.append(DanglingReference(path, ref.collection, ref.id))
        return dangling

    def validate(self):
        """Raise DanglingReferenceError listing all unresolved references."""
        dangling = self.dangling_references()
        if dangling:
            raise DanglingReferenceError(dangling)

    # ------------------------------------------------------------------
    # comparison / plain data
    # ------------------------------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, RDML):
            return NotImplemented
        return (self.version == other.version
                and self.date_made == other.date_made
                and self.date_updated == other.date_updated
                and all(getattr(self, attr) == getattr(other, attr) for _, attr in ROOT_ORDER))

    __hash__ = None

    def __repr__(self):
        sizes = ", ".join(f"{attr}={len(getattr(self, attr))}"
                          for _, attr in ROOT_ORDER if len(getattr(self, attr)))
        return f"RDML(version={self.version!r}, {sizes})"

    def to_dict(self) -> dict:
        """JSON-safe dict of the whole document."""
        data = {
            'version': self.version,
            'date_made': self.date_made,
            'date_updated': self.date_updated,
        }
        for _, attr in ROOT_ORDER:
            data[attr] = [entity.to_dict() for entity in getattr(self, attr).values()]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'RDML':
        rdml = cls(version=data.get('version', DEFAULT_VERSION),
                   date_made=data.get('date_made'),
                   date_updated=data.get('date_updated'))
        for tag, attr in ROOT_ORDER:
            entry_type = COLLECTION_REGISTRY[tag]
            for item in data.get(attr, []):
                getattr(rdml, attr).add(entry_type.from_dict(item))
        return rdml

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Union[str, Path], strict: bool = False) -> 'RDML':
        """Read an ``.rdml`` (zip) or plain ``.xml`` file."""
        from RDMLOrganizer.core.parser import load
        rdml = load(path, strict=strict)
        n_runs = sum(len(exp.run) for exp in rdml.experiment.values())
        print(f"✓ Loaded RDML v{rdml.version}: {len(rdml.experiment)} experiments, {n_runs} runs")
        return rdml

    def save(self, path: Union[str, Path], compress: bool = True) -> Path:
        """Write the document; compressed ``.rdml`` container by default."""
        from RDMLOrganizer.core.serializer import save
        path = save(self, path, compress=compress)
        print(f"✓ Saved RDML to: {path}")
        return path

    def to_string(self, pretty: bool = True) -> str:
        """Markup text of the document (no compression)."""
        from RDMLOrganizer.core.serializer import to_string
        return to_string(self, pretty=pretty)

    # ------------------------------------------------------------------
    # tabular views
    # ------------------------------------------------------------------

    def as_table(self, name_pattern=None, row_filter=None, **columns):
        """One row per (experiment, run, react, target); see ``core.table.as_table``."""
        from RDMLOrganizer.core.table import as_table
        return as_table(self, name_pattern=name_pattern, row_filter=row_filter, **columns)

    def get_fdata(self, table, dp_type: str = 'adp', long_table: bool = False):
        """Fluorescence matrix for *table*; see ``core.fdata.get_fdata``."""
        from RDMLOrganizer.core.fdata import get_fdata
        return get_fdata(self, table, dp_type=dp_type, long_table=long_table)

    def set_fdata(self, fdata, table, dp_type: str = 'adp'):
        """Write a fluorescence matrix back; see ``core.fdata.set_fdata``."""
        from RDMLOrganizer.core.fdata import set_fdata
        return set_fdata(self, fdata, table, dp_type=dp_type)
