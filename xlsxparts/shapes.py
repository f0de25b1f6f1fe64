"""Drawing markers and the shape objects placed inside drawing anchors."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum

__all__ = [
    "XDR_NS",
    "A_NS",
    "R_NS",
    "ObjectType",
    "Marker",
    "ShapeData",
    "parse_marker",
    "marker_element",
    "parse_point",
    "parse_extent",
    "parse_connection_shape",
    "connection_shape_element",
    "shape_element",
]

XDR_NS = "http://schemas.openxmlformats.org/drawingml/2006/spreadsheetDrawing"
A_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

ET.register_namespace("xdr", XDR_NS)
ET.register_namespace("a", A_NS)
ET.register_namespace("r", R_NS)


def _xdr(local: str) -> str:
    return f"{{{XDR_NS}}}{local}"


def _a(local: str) -> str:
    return f"{{{A_NS}}}{local}"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _to_int(text: str | None) -> int:
    try:
        return int(text) if text is not None else 0
    except ValueError:
        return 0


class ObjectType(Enum):
    """The kind of object a drawing anchor holds."""

    UNKNOWN = "unknown"
    GRAPHIC_FRAME = "graphicFrame"
    SHAPE = "sp"
    GROUP_SHAPE = "grpSp"
    CONNECTION_SHAPE = "cxnSp"
    PICTURE = "pic"


@dataclass(frozen=True)
class Marker:
    """A cell position with offsets, as used by cell anchors."""

    row: int = 0
    col: int = 0
    row_offset: int = 0
    col_offset: int = 0


@dataclass
class ShapeData:
    """Geometry, line and style settings of a shape or connection shape."""

    macro: str = ""
    textlink: str = ""
    c_nv_pr_name: str = ""
    c_nv_pr_id: str = ""
    bw_mode: str | None = None
    flip_v: str = ""
    offset: tuple[int, int] = (0, 0)
    extent: tuple[int, int] = (0, 0)
    preset_geometry: str = ""
    line_align: str = ""
    line_compound: str = ""
    line_cap: str = ""
    line_width: str = ""
    head_end_width: str = ""
    head_end_length: str = ""
    head_end_type: str = ""
    tail_end_width: str = ""
    tail_end_length: str = ""
    tail_end_type: str = ""
    line_ref_idx: str = ""
    line_ref_color: str = ""
    fill_ref_idx: str = ""
    fill_ref_color: str = ""
    effect_ref_idx: str = ""
    effect_ref_color: str = ""
    font_ref_idx: str = ""
    font_ref_color: str = ""
    dpi: int = 0
    rot_with_shape: int = 0
    blip_cstate: str | None = None


def parse_marker(element: ET.Element) -> Marker:
    """Read a ``from`` or ``to`` marker element."""
    values = {"col": 0, "colOff": 0, "row": 0, "rowOff": 0}
    for child in element:
        name = _local_name(child.tag)
        if name in values:
            values[name] = _to_int((child.text or "").strip())
    return Marker(
        row=values["row"],
        col=values["col"],
        row_offset=values["rowOff"],
        col_offset=values["colOff"],
    )


def marker_element(marker: Marker, tag: str) -> ET.Element:
    """Return the ``xdr:<tag>`` element (``from`` or ``to``) for ``marker``."""
    elem = ET.Element(_xdr(tag))
    for name, value in (
        ("col", marker.col),
        ("colOff", marker.col_offset),
        ("row", marker.row),
        ("rowOff", marker.row_offset),
    ):
        ET.SubElement(elem, _xdr(name)).text = str(value)
    return elem


def parse_point(element: ET.Element) -> tuple[int, int]:
    """Return the ``(x, y)`` attributes of a position element."""
    return _to_int(element.get("x")), _to_int(element.get("y"))


def parse_extent(element: ET.Element) -> tuple[int, int]:
    """Return the ``(cx, cy)`` attributes of an extent element."""
    return _to_int(element.get("cx")), _to_int(element.get("cy"))


def _scheme_color(element: ET.Element) -> str | None:
    children = list(element)
    if children and _local_name(children[0].tag) == "schemeClr":
        return children[0].get("val", "").strip()
    return None


_REF_FIELDS = {
    "lnRef": ("line_ref_idx", "line_ref_color"),
    "fillRef": ("fill_ref_idx", "fill_ref_color"),
    "effectRef": ("effect_ref_idx", "effect_ref_color"),
    "fontRef": ("font_ref_idx", "font_ref_color"),
}


def parse_connection_shape(element: ET.Element) -> ShapeData:
    """Read a ``cxnSp`` (connection shape) element."""
    if _local_name(element.tag) != "cxnSp":
        raise ValueError(f"expected a cxnSp element, got {element.tag!r}")
    shape = ShapeData(macro=element.get("macro", ""))
    has_offset = False
    for elem in element.iter():
        if elem is element:
            continue
        name = _local_name(elem.tag)
        attrs = elem.attrib
        if name == "cNvPr":
            shape.c_nv_pr_name = attrs.get("name", "")
            shape.c_nv_pr_id = attrs.get("id", "")
        elif name == "spPr":
            shape.bw_mode = attrs.get("bwMode")
        elif name == "xfrm":
            shape.flip_v = attrs.get("flipV", "")
        elif name == "off":
            shape.offset = parse_point(elem)
            has_offset = True
        elif name == "ext" and has_offset:
            shape.extent = parse_extent(elem)
            has_offset = False
        elif name == "prstGeom":
            shape.preset_geometry = attrs.get("prst", "").strip()
        elif name == "ln":
            shape.line_align = attrs.get("algn", "").strip()
            shape.line_compound = attrs.get("cmpd", "").strip()
            shape.line_cap = attrs.get("cap", "").strip()
            shape.line_width = attrs.get("w", "").strip()
        elif name == "headEnd":
            shape.head_end_width = attrs.get("w", "").strip()
            shape.head_end_length = attrs.get("len", "").strip()
            shape.head_end_type = attrs.get("type", "").strip()
        elif name == "tailEnd":
            shape.tail_end_width = attrs.get("w", "").strip()
            shape.tail_end_length = attrs.get("len", "").strip()
            shape.tail_end_type = attrs.get("type", "").strip()
        elif name in _REF_FIELDS:
            idx_field, color_field = _REF_FIELDS[name]
            setattr(shape, idx_field, attrs.get("idx", "").strip())
            color = _scheme_color(elem)
            if color is not None:
                setattr(shape, color_field, color)
    return shape


def _append_xfrm(parent: ET.Element, shape: ShapeData, flip_v: bool) -> None:
    xfrm = ET.SubElement(parent, _a("xfrm"))
    if flip_v and shape.flip_v:
        xfrm.set("flipV", shape.flip_v)
    ET.SubElement(xfrm, _a("off"), {"x": str(shape.offset[0]), "y": str(shape.offset[1])})
    ET.SubElement(
        xfrm, _a("ext"), {"cx": str(shape.extent[0]), "cy": str(shape.extent[1])}
    )


def _append_geometry(parent: ET.Element, shape: ShapeData) -> None:
    geom = ET.SubElement(parent, _a("prstGeom"), {"prst": shape.preset_geometry})
    ET.SubElement(geom, _a("avLst"))


def _append_line_end(parent: ET.Element, tag: str, kind: str, width: str, length: str) -> None:
    if not (kind or width or length):
        return
    end = ET.SubElement(parent, _a(tag))
    if kind:
        end.set("type", kind)
    if width:
        end.set("w", width)
    if length:
        end.set("len", length)


def _append_line(parent: ET.Element, shape: ShapeData) -> None:
    line = ET.SubElement(parent, _a("ln"))
    if shape.line_width and shape.line_cap:
        line.set("w", shape.line_width)
        line.set("cap", shape.line_cap)
        if shape.line_compound:
            line.set("cmpd", shape.line_compound)
        if shape.line_align:
            line.set("algn", shape.line_align)
    _append_line_end(
        line, "headEnd", shape.head_end_type, shape.head_end_width, shape.head_end_length
    )
    _append_line_end(
        line, "tailEnd", shape.tail_end_type, shape.tail_end_width, shape.tail_end_length
    )


def _append_style(parent: ET.Element, shape: ShapeData) -> None:
    style = ET.SubElement(parent, _xdr("style"))
    for tag, (idx_field, color_field) in _REF_FIELDS.items():
        ref = ET.SubElement(style, _a(tag), {"idx": getattr(shape, idx_field)})
        ET.SubElement(ref, _a("schemeClr"), {"val": getattr(shape, color_field)})


def connection_shape_element(shape: ShapeData) -> ET.Element:
    """Return the ``xdr:cxnSp`` element for a connection shape."""
    root = ET.Element(_xdr("cxnSp"), {"macro": shape.macro})

    nv = ET.SubElement(root, _xdr("nvCxnSpPr"))
    ET.SubElement(nv, _xdr("cNvPr"), {"id": shape.c_nv_pr_id, "name": shape.c_nv_pr_name})
    ET.SubElement(nv, _xdr("cNvCxnSpPr"))

    sp_pr = ET.SubElement(root, _xdr("spPr"))
    if shape.bw_mode is not None:
        sp_pr.set("bwMode", shape.bw_mode)
    _append_xfrm(sp_pr, shape, flip_v=True)
    _append_geometry(sp_pr, shape)
    _append_line(sp_pr, shape)

    _append_style(root, shape)
    return root


def shape_element(shape: ShapeData, embed_rid: str | None = None) -> ET.Element:
    """Return the ``xdr:sp`` element for a shape.

    ``embed_rid`` is the relationship id of a picture filling the shape, or
    ``None`` when the shape has no picture.
    """
    root = ET.Element(_xdr("sp"), {"macro": shape.macro, "textlink": shape.textlink})

    nv = ET.SubElement(root, _xdr("nvSpPr"))
    c_nv_pr = ET.SubElement(
        nv, _xdr("cNvPr"), {"id": shape.c_nv_pr_id, "name": shape.c_nv_pr_name}
    )
    ET.SubElement(c_nv_pr, _a("extLst"))
    ET.SubElement(nv, _xdr("cNvSpPr"))

    sp_pr = ET.SubElement(root, _xdr("spPr"))
    if shape.bw_mode is not None:
        sp_pr.set("bwMode", shape.bw_mode)
    _append_xfrm(sp_pr, shape, flip_v=False)
    _append_geometry(sp_pr, shape)

    if embed_rid is not None:
        fill = ET.SubElement(
            sp_pr,
            _a("blipFill"),
            {"dpi": str(shape.dpi), "rotWithShape": str(shape.rot_with_shape)},
        )
        blip = ET.SubElement(fill, _a("blip"), {f"{{{R_NS}}}embed": embed_rid})
        if shape.blip_cstate is not None:
            blip.set("cstate", shape.blip_cstate)
        ET.SubElement(fill, _a("srcRect"))
        stretch = ET.SubElement(fill, _a("stretch"))
        ET.SubElement(stretch, _a("fillRect"))

    _append_line(sp_pr, shape)
    _append_style(root, shape)
    return root