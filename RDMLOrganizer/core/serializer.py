#!/usr/bin/env python3
"""
RDML document tree → markup.

Root children are written in ``ROOT_ORDER`` whatever order the caller
filled the collections in.  A document with unresolved cross references is
never written: ``ValidationError`` is raised before any output is produced.
"""

import copy
import io
import warnings
import zipfile
from pathlib import Path
from typing import Union

from lxml import etree

from RDMLOrganizer.core.defaults import (
    ARCHIVE_MEMBER,
    DATA_FIELDS_SINCE_1_3,
    RDML_NAMESPACE,
    ROOT_ORDER,
)
from RDMLOrganizer.core.document import RDML
from RDMLOrganizer.core.errors import RDMLWarning, ValidationError
from RDMLOrganizer.schema.base import qname


def _check(rdml: RDML):
    dangling = rdml.dangling_references()
    if dangling:
        raise ValidationError(
            f"Refusing to serialize: {len(dangling)} unresolved reference(s)", dangling)
    _check_version_fields(rdml)


def _check_version_fields(rdml: RDML):
    """Warn about Data fields the declared version does not know."""
    if tuple(int(part) for part in rdml.version.split(".")) >= (1, 3):
        return
    paths = []
    for experiment in rdml.experiment.values():
        for run in experiment.run.values():
            for react in run.react.values():
                for data in react.data.values():
                    used = [name for name in DATA_FIELDS_SINCE_1_3
                            if getattr(data, name) is not None]
                    if used:
                        paths.append(
                            f"/rdml/experiment[@id='{experiment.id}']/run[@id='{run.id}']"
                            f"/react[@id='{react.id}']/{data.path_label('data')}: {', '.join(used)}")
    if paths:
        warnings.warn(
            f"Data fields introduced in RDML 1.3 are set on a version {rdml.version} "
            "document; they are written anyway (set rdml.version = '1.3' to conform):\n"
            + "\n".join(f"  - {path}" for path in paths),
            RDMLWarning,
        )


def to_element(rdml: RDML) -> etree._Element:
    """Root ``<rdml>`` element of the document (no validation)."""
    root = etree.Element(qname('rdml'), nsmap={None: RDML_NAMESPACE})
    root.set('version', rdml.version)
    if rdml.date_made is not None:
        etree.SubElement(root, qname('dateMade')).text = rdml.date_made
    if rdml.date_updated is not None:
        etree.SubElement(root, qname('dateUpdated')).text = rdml.date_updated
    for tag, attr in ROOT_ORDER:
        for entity in getattr(rdml, attr).values():
            root.append(entity.to_xml(tag))
    for extension in rdml._extensions:
        root.append(copy.deepcopy(extension))
    return root


def to_string(rdml: RDML, pretty: bool = True) -> str:
    """Markup text, for callers that compress or transport it themselves."""
    _check(rdml)
    return etree.tostring(to_element(rdml), pretty_print=pretty, encoding='unicode')


def to_bytes(rdml: RDML, compress: bool = False, pretty: bool = True,
             archive_member: str = ARCHIVE_MEMBER) -> bytes:
    """UTF-8 markup with XML declaration, optionally wrapped in a zip container."""
    _check(rdml)
    data = etree.tostring(to_element(rdml), pretty_print=pretty,
                          xml_declaration=True, encoding='UTF-8')
    if compress:
        return compress_bytes(data, archive_member)
    return data


def compress_bytes(data: bytes, archive_member: str = ARCHIVE_MEMBER) -> bytes:
    """Zip container holding *data* as its single deflated entry."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(archive_member, data)
    return buffer.getvalue()


def save(rdml: RDML, path: Union[str, Path], compress: bool = True) -> Path:
    """Write *rdml* to *path*; nothing is written if validation fails."""
    data = to_bytes(rdml, compress=compress)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as fh:
        fh.write(data)
    return path
