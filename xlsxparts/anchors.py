"""Drawing anchors: where a picture, chart or shape sits on a worksheet."""

from __future__ import annotations

import posixpath
import xml.etree.ElementTree as ET
from typing import Protocol

from xlsxparts.shapes import (
    A_NS,
    R_NS,
    XDR_NS,
    Marker,
    ObjectType,
    ShapeData,
    connection_shape_element,
    marker_element,
    parse_connection_shape,
    parse_extent,
    parse_marker,
    parse_point,
    shape_element,
)

__all__ = [
    "CHART_NS",
    "DrawingAnchor",
    "AbsoluteAnchor",
    "OneCellAnchor",
    "TwoCellAnchor",
]

CHART_NS = "http://schemas.openxmlformats.org/drawingml/2006/chart"

ET.register_namespace("c", CHART_NS)


def _xdr(local: str) -> str:
    return f"{{{XDR_NS}}}{local}"


def _a(local: str) -> str:
    return f"{{{A_NS}}}{local}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class _DrawingHost(Protocol):
    """What an anchor needs from the drawing part that owns it."""

    anchors: list
    file_path: str

    def add_relationship(self, rel_type: str, target: str) -> str: ...

    def relationship_target(self, rid: str) -> str: ...

    def register_chart(self, path: str) -> int: ...

    def register_media(self, path: str | None, data: bytes | None, suffix: str) -> int: ...


class DrawingAnchor:
    """An object placed in a drawing part.

    The anchor registers itself with ``drawing`` on creation; its id is its
    1-based position among the drawing's anchors.
    """

    def __init__(
        self, drawing: _DrawingHost, object_type: ObjectType = ObjectType.UNKNOWN
    ) -> None:
        self.drawing = drawing
        self.object_type = object_type
        self.shape: ShapeData | None = None
        self.picture_index: int | None = None
        self.picture_suffix = ""
        self.chart_index: int | None = None
        drawing.anchors.append(self)
        self.id = len(drawing.anchors)

    def row(self) -> int:
        """Return the 0-based row of the anchor, or -1 if it has none."""
        return -1

    def col(self) -> int:
        """Return the 0-based column of the anchor, or -1 if it has none."""
        return -1

    def set_picture(self, data: bytes, suffix: str = "png") -> None:
        """Make the anchor hold a picture with the given image bytes."""
        self.picture_index = self.drawing.register_media(None, data, suffix)
        self.picture_suffix = suffix
        self.object_type = ObjectType.PICTURE

    def set_chart(self, chart_path: str) -> None:
        """Make the anchor hold the chart stored at ``chart_path``."""
        self.chart_index = self.drawing.register_chart(chart_path)
        self.object_type = ObjectType.GRAPHIC_FRAME

    def _resolve(self, name: str) -> str:
        base = posixpath.dirname(self.drawing.file_path)
        return posixpath.normpath(posixpath.join(base, name) if base else name)

    def load(self, element: ET.Element) -> None:
        """Read the object element (``sp``, ``pic``, ``graphicFrame``, ...)."""
        name = _local_name(element.tag)
        if name == "sp":
            self.object_type = ObjectType.SHAPE
            self.shape = ShapeData(
                macro=element.get("macro", ""), textlink=element.get("textlink", "")
            )
        elif name == "grpSp":
            self.object_type = ObjectType.GROUP_SHAPE
        elif name == "graphicFrame":
            self.object_type = ObjectType.GRAPHIC_FRAME
            for elem in element.iter():
                if _local_name(elem.tag) == "chart":
                    rid = elem.get(f"{{{R_NS}}}id", "")
                    path = self._resolve(self.drawing.relationship_target(rid))
                    self.chart_index = self.drawing.register_chart(path)
        elif name == "cxnSp":
            self.object_type = ObjectType.CONNECTION_SHAPE
            self.shape = parse_connection_shape(element)
        elif name == "pic":
            self.object_type = ObjectType.PICTURE
            for elem in element.iter():
                if _local_name(elem.tag) == "blip":
                    rid = elem.get(f"{{{R_NS}}}embed", "")
                    path = self._resolve(self.drawing.relationship_target(rid))
                    suffix = path.rsplit(".", 1)[-1] if "." in path else ""
                    self.picture_suffix = suffix
                    self.picture_index = self.drawing.register_media(path, None, suffix)

    def _picture_rid(self) -> str:
        target = f"../media/image{self.picture_index + 1}.{self.picture_suffix}"
        return self.drawing.add_relationship("/image", target)

    def _picture_element(self) -> ET.Element:
        if self.picture_index is None:
            raise ValueError("picture anchor has no picture")
        pic = ET.Element(_xdr("pic"))
        nv = ET.SubElement(pic, _xdr("nvPicPr"))
        ET.SubElement(
            nv, _xdr("cNvPr"), {"id": str(self.id + 1), "name": f"Picture {self.id}"}
        )
        c_nv = ET.SubElement(nv, _xdr("cNvPicPr"))
        ET.SubElement(c_nv, _a("picLocks"), {"noChangeAspect": "1"})

        rid = self._picture_rid()
        fill = ET.SubElement(pic, _xdr("blipFill"))
        ET.SubElement(fill, _a("blip"), {f"{{{R_NS}}}embed": rid})
        stretch = ET.SubElement(fill, _a("stretch"))
        ET.SubElement(stretch, _a("fillRect"))

        sp_pr = ET.SubElement(pic, _xdr("spPr"))
        geom = ET.SubElement(sp_pr, _a("prstGeom"), {"prst": "rect"})
        ET.SubElement(geom, _a("avLst"))
        return pic

    def _graphic_frame_element(self) -> ET.Element:
        if self.chart_index is None:
            raise ValueError("graphic frame anchor has no chart")
        frame = ET.Element(_xdr("graphicFrame"), {"macro": ""})
        nv = ET.SubElement(frame, _xdr("nvGraphicFramePr"))
        ET.SubElement(nv, _xdr("cNvPr"), {"id": str(self.id), "name": f"Chart {self.id}"})
        ET.SubElement(nv, _xdr("cNvGraphicFramePr"))
        ET.SubElement(frame, _xdr("xfrm"))
        graphic = ET.SubElement(frame, _a("graphic"))
        data = ET.SubElement(graphic, _a("graphicData"), {"uri": CHART_NS})
        rid = self.drawing.add_relationship(
            "/chart", f"../charts/chart{self.chart_index + 1}.xml"
        )
        ET.SubElement(data, f"{{{CHART_NS}}}chart", {f"{{{R_NS}}}id": rid})
        return frame

    def to_element(self) -> ET.Element | None:
        """Return the object element, or ``None`` if nothing is written for it."""
        kind = self.object_type
        if kind is ObjectType.PICTURE:
            return self._picture_element()
        if kind is ObjectType.CONNECTION_SHAPE:
            return connection_shape_element(self.shape or ShapeData())
        if kind is ObjectType.GRAPHIC_FRAME:
            return self._graphic_frame_element()
        if kind is ObjectType.SHAPE:
            rid = self._picture_rid() if self.picture_index is not None else None
            return shape_element(self.shape or ShapeData(), rid)
        return None

    def _wrap(self, root: ET.Element) -> ET.Element:
        obj = DrawingAnchor.to_element(self)
        if obj is not None:
            root.append(obj)
        ET.SubElement(root, _xdr("clientData"))
        return root


class AbsoluteAnchor(DrawingAnchor):
    """An anchor at a fixed position, independent of cells."""

    def __init__(
        self, drawing: _DrawingHost, object_type: ObjectType = ObjectType.UNKNOWN
    ) -> None:
        super().__init__(drawing, object_type)
        self.pos: tuple[int, int] = (0, 0)
        self.ext: tuple[int, int] = (0, 0)

    def load(self, element: ET.Element) -> None:
        """Read an ``absoluteAnchor`` element."""
        for child in element:
            name = _local_name(child.tag)
            if name == "pos":
                self.pos = parse_point(child)
            elif name == "ext":
                self.ext = parse_extent(child)
            else:
                super().load(child)

    def to_element(self) -> ET.Element:
        """Return the ``xdr:absoluteAnchor`` element."""
        root = ET.Element(_xdr("absoluteAnchor"))
        ET.SubElement(root, _xdr("pos"), {"x": str(self.pos[0]), "y": str(self.pos[1])})
        ET.SubElement(root, _xdr("ext"), {"cx": str(self.ext[0]), "cy": str(self.ext[1])})
        return self._wrap(root)


class OneCellAnchor(DrawingAnchor):
    """An anchor fixed to one cell with an explicit extent."""

    def __init__(
        self, drawing: _DrawingHost, object_type: ObjectType = ObjectType.UNKNOWN
    ) -> None:
        super().__init__(drawing, object_type)
        self.from_marker = Marker()
        self.ext: tuple[int, int] = (0, 0)

    def row(self) -> int:
        """Return the row of the anchoring cell."""
        return self.from_marker.row

    def col(self) -> int:
        """Return the column of the anchoring cell."""
        return self.from_marker.col

    def load(self, element: ET.Element) -> None:
        """Read a ``oneCellAnchor`` element."""
        for child in element:
            name = _local_name(child.tag)
            if name == "from":
                self.from_marker = parse_marker(child)
            elif name == "ext":
                self.ext = parse_extent(child)
            else:
                super().load(child)

    def to_element(self) -> ET.Element:
        """Return the ``xdr:oneCellAnchor`` element."""
        root = ET.Element(_xdr("oneCellAnchor"))
        root.append(marker_element(self.from_marker, "from"))
        ET.SubElement(root, _xdr("ext"), {"cx": str(self.ext[0]), "cy": str(self.ext[1])})
        return self._wrap(root)


class TwoCellAnchor(DrawingAnchor):
    """An anchor spanning from one cell to another, moving with the cells."""

    def __init__(
        self, drawing: _DrawingHost, object_type: ObjectType = ObjectType.UNKNOWN
    ) -> None:
        super().__init__(drawing, object_type)
        self.from_marker = Marker()
        self.to_marker = Marker()
        self.edit_as: str | None = None

    def row(self) -> int:
        """Return the row of the top-left cell."""
        return self.from_marker.row

    def col(self) -> int:
        """Return the column of the top-left cell."""
        return self.from_marker.col

    def load(self, element: ET.Element) -> None:
        """Read a ``twoCellAnchor`` element."""
        self.edit_as = element.get("editAs")
        for child in element:
            name = _local_name(child.tag)
            if name == "from":
                self.from_marker = parse_marker(child)
            elif name == "to":
                self.to_marker = parse_marker(child)
            elif name == "clientData":
                continue
            else:
                super().load(child)

    def to_element(self) -> ET.Element:
        """Return the ``xdr:twoCellAnchor`` element."""
        root = ET.Element(_xdr("twoCellAnchor"))
        if self.edit_as is not None:
            root.set("editAs", self.edit_as)
        root.append(marker_element(self.from_marker, "from"))
        root.append(marker_element(self.to_marker, "to"))
        return self._wrap(root)