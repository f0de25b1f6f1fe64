"""The drawing part of a worksheet: a list of anchored pictures, charts and shapes."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable

from xlsxparts.anchors import AbsoluteAnchor, DrawingAnchor, OneCellAnchor, TwoCellAnchor
from xlsxparts.shapes import XDR_NS

__all__ = ["DOCUMENT_REL_PREFIX", "Relationship", "Drawing"]

DOCUMENT_REL_PREFIX = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

_ANCHOR_CLASSES = {
    "absoluteAnchor": AbsoluteAnchor,
    "oneCellAnchor": OneCellAnchor,
    "twoCellAnchor": TwoCellAnchor,
}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@dataclass(frozen=True)
class Relationship:
    """One entry of a part's relationships: an id, a type URI and a target."""

    id: str
    rel_type: str
    target: str


@dataclass
class _MediaFile:
    path: str | None
    data: bytes | None
    suffix: str


class Drawing:
    """A drawing part holding the anchors of one sheet.

    ``charts`` and ``media`` are the workbook-wide lists of chart paths and
    media files; pass shared lists to let several drawings use them together.
    ``relationships`` are the entries of the drawing's own relationships part,
    which anchors consult when they are loaded.
    """

    def __init__(
        self,
        file_path: str = "xl/drawings/drawing1.xml",
        relationships: Iterable[Relationship] = (),
        charts: list[str] | None = None,
        media: list[_MediaFile] | None = None,
    ) -> None:
        self.file_path = file_path
        self.relationships: list[Relationship] = list(relationships)
        self.charts: list[str] = charts if charts is not None else []
        self.media: list[_MediaFile] = media if media is not None else []
        self.anchors: list[DrawingAnchor] = []

    def add_relationship(self, rel_type: str, target: str) -> str:
        """Add a document relationship and return its new id.

        ``rel_type`` is the short form such as ``"/image"``.
        """
        rid = f"rId{len(self.relationships) + 1}"
        self.relationships.append(Relationship(rid, DOCUMENT_REL_PREFIX + rel_type, target))
        return rid

    def relationship_target(self, rid: str) -> str:
        """Return the target of relationship ``rid``; raise KeyError if unknown."""
        for rel in self.relationships:
            if rel.id == rid:
                return rel.target
        raise KeyError(f"no relationship with id {rid!r}")

    def register_chart(self, path: str) -> int:
        """Return the index of the chart at ``path``, adding it if new."""
        try:
            return self.charts.index(path)
        except ValueError:
            self.charts.append(path)
            return len(self.charts) - 1

    def register_media(self, path: str | None, data: bytes | None, suffix: str) -> int:
        """Return the index of a media file, adding it if new.

        A file with a ``path`` already known is reused; files given only as
        data are always added.
        """
        if path is not None:
            for index, entry in enumerate(self.media):
                if entry.path == path:
                    if data is not None:
                        entry.data = data
                    return index
        self.media.append(_MediaFile(path, data, suffix))
        return len(self.media) - 1

    def to_xml_bytes(self) -> bytes:
        """Serialize the drawing; the relationships are rebuilt along the way."""
        self.relationships.clear()
        root = ET.Element(f"{{{XDR_NS}}}wsDr")
        for anchor in self.anchors:
            root.append(anchor.to_element())
        return (_DECLARATION + ET.tostring(root, encoding="unicode")).encode("utf-8")

    def load_xml_bytes(self, data: bytes) -> None:
        """Read the anchors of a drawing part, appending them to ``anchors``."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise ValueError(f"malformed drawing XML: {exc}") from exc
        for child in root:
            anchor_cls = _ANCHOR_CLASSES.get(_local_name(child.tag))
            if anchor_cls is not None:
                anchor_cls(self).load(child)