#!/usr/bin/env python3
"""
Markup → RDML document tree.

* Plain XML and zip-compressed ``.rdml`` containers are both accepted; the
  container is recognised by its magic bytes, not the file extension.
* The root ``version`` must be one of ``SUPPORTED_VERSIONS``.
* Entities are built bottom-up by ``SchemaType.from_xml``.  Cross
  references are only checked once the whole document is read, because
  they may point forward.
"""

import io
import warnings
import zipfile
from pathlib import Path
from typing import Sequence, Union

from lxml import etree

from RDMLOrganizer.core.defaults import ARCHIVE_MEMBER, RDML_NAMESPACE, SUPPORTED_VERSIONS
from RDMLOrganizer.core.document import RDML
from RDMLOrganizer.core.errors import (
    DanglingReferenceError,
    ParseError,
    RDMLWarning,
    UnsupportedVersionError,
)
from RDMLOrganizer.schema import COLLECTION_REGISTRY
from RDMLOrganizer.schema.base import detached, split_tag

_ZIP_MAGIC = b"PK\x03\x04"


def parse(data: Union[bytes, str], strict: bool = False,
          supported_versions: Sequence[str] = SUPPORTED_VERSIONS,
          archive_member: str = ARCHIVE_MEMBER) -> RDML:
    """
    Parse an RDML document.

    Parameters
    ----------
    data : bytes or str
        Markup text, or the bytes of a compressed container.
    strict : bool
        Raise DanglingReferenceError for unresolved cross references
        instead of warning about them.
    supported_versions : sequence of str
        Accepted values of the root ``version`` attribute.
    archive_member : str
        Preferred entry inside a compressed container.

    Returns
    -------
    RDML

    Raises
    ------
    ParseError
        Malformed XML, wrong root, or a schema violation (with its path).
    UnsupportedVersionError
        Unknown RDML version.
    """
    # text input: the bytes handed to lxml are UTF-8 whatever the declaration says
    encoding = None
    if isinstance(data, str):
        data = data.encode('utf-8')
        encoding = 'utf-8'
    if data[:4] == _ZIP_MAGIC:
        data = decompress(data, archive_member)

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True,
                             encoding=encoding)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as err:
        raise ParseError("/", f"not a well-formed XML document: {err}") from err

    ns, tag = split_tag(root.tag)
    if tag != 'rdml' or ns not in (None, RDML_NAMESPACE):
        raise ParseError(f"/{tag}", "root element is not 'rdml'")
    version = root.get('version')
    if version is None:
        raise ParseError("/rdml/@version", "missing version attribute")
    if version not in supported_versions:
        raise UnsupportedVersionError(
            "/rdml/@version",
            f"unsupported RDML version {version!r} (supported: {', '.join(supported_versions)})")

    rdml = RDML(version=version)
    for child in root:
        if not isinstance(child.tag, str):
            continue
        ns, tag = split_tag(child.tag)
        if ns not in (None, RDML_NAMESPACE):
            rdml._extensions.append(detached(child))
            continue
        if tag == 'dateMade':
            rdml.date_made = (child.text or "").strip()
            continue
        if tag == 'dateUpdated':
            rdml.date_updated = (child.text or "").strip()
            continue

        path = f"/rdml/{tag}"
        entry_type = COLLECTION_REGISTRY.get(tag)
        if entry_type is None:
            warnings.warn(f"{path}: unknown element dropped", RDMLWarning)
            continue
        if child.get('id'):
            path += f"[@id='{child.get('id')}']"
        entity = entry_type.from_xml(child, path)
        collection = rdml.collection(tag)
        if entity.key() in collection:
            warnings.warn(f"{path}: duplicate key {entity.key()!r}, last one kept", RDMLWarning)
        collection.add(entity)

    dangling = rdml.dangling_references()
    if dangling:
        if strict:
            raise DanglingReferenceError(dangling)
        warnings.warn(
            f"Source document is not conformant: {len(dangling)} unresolved reference(s):\n"
            + "\n".join(f"  - {ref}" for ref in dangling),
            RDMLWarning,
        )
    return rdml


def decompress(data: bytes, archive_member: str = ARCHIVE_MEMBER) -> bytes:
    """Markup bytes from a zip container (*archive_member*, else the first file)."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = [info.filename for info in archive.infolist() if not info.is_dir()]
            if not names:
                raise ParseError("/", "compressed container holds no file")
            member = archive_member if archive_member in names else names[0]
            return archive.read(member)
    except zipfile.BadZipFile as err:
        raise ParseError("/", f"corrupt compressed container: {err}") from err


def load(path: Union[str, Path], strict: bool = False, **kwargs) -> RDML:
    """Read and parse the file at *path* (see ``parse`` for keyword arguments)."""
    with open(path, 'rb') as fh:
        data = fh.read()
    return parse(data, strict=strict, **kwargs)
