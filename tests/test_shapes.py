import xml.etree.ElementTree as ET

import pytest

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

NS = f'xmlns:xdr="{XDR_NS}" xmlns:a="{A_NS}"'

CXN_XML = f"""
<xdr:cxnSp {NS} macro="m1">
  <xdr:nvCxnSpPr>
    <xdr:cNvPr id="4" name="Connector 3"/>
    <xdr:cNvCxnSpPr/>
  </xdr:nvCxnSpPr>
  <xdr:spPr bwMode="auto">
    <a:xfrm flipV="1">
      <a:off x="100" y="200"/>
      <a:ext cx="300" cy="400"/>
    </a:xfrm>
    <a:prstGeom prst=" line "><a:avLst/></a:prstGeom>
    <a:ln w="9525" cap="flat" cmpd="sng" algn="ctr">
      <a:headEnd type="triangle" w="med" len="med"/>
      <a:tailEnd type="none"/>
    </a:ln>
  </xdr:spPr>
  <xdr:style>
    <a:lnRef idx="1"><a:schemeClr val="accent1"/></a:lnRef>
    <a:fillRef idx="0"><a:schemeClr val="accent2"/></a:fillRef>
    <a:effectRef idx="0"><a:schemeClr val="accent3"/></a:effectRef>
    <a:fontRef idx="minor"><a:schemeClr val="tx1"/></a:fontRef>
  </xdr:style>
</xdr:cxnSp>
"""


def _find(elem, ns, local):
    return elem.find(f".//{{{ns}}}{local}")


def test_parse_marker_reads_children():
    xml = (
        f"<xdr:from {NS}><xdr:col>3</xdr:col><xdr:colOff>15</xdr:colOff>"
        "<xdr:row>7</xdr:row><xdr:rowOff>25</xdr:rowOff></xdr:from>"
    )
    assert parse_marker(ET.fromstring(xml)) == Marker(row=7, col=3, row_offset=25, col_offset=15)


def test_parse_marker_missing_and_bad_values_are_zero():
    xml = f"<xdr:to {NS}><xdr:col>abc</xdr:col><xdr:row>2</xdr:row></xdr:to>"
    assert parse_marker(ET.fromstring(xml)) == Marker(row=2)


def test_marker_round_trip():
    marker = Marker(row=10, col=4, row_offset=99, col_offset=17)
    elem = marker_element(marker, "to")
    assert elem.tag == f"{{{XDR_NS}}}to"
    assert [c.tag.rsplit("}", 1)[-1] for c in elem] == ["col", "colOff", "row", "rowOff"]
    assert parse_marker(elem) == marker


def test_parse_point_and_extent():
    assert parse_point(ET.fromstring('<pos x="12" y="34"/>')) == (12, 34)
    assert parse_extent(ET.fromstring('<ext cx="56" cy="78"/>')) == (56, 78)
    assert parse_extent(ET.fromstring("<ext/>")) == (0, 0)


def test_parse_connection_shape_fields():
    shape = parse_connection_shape(ET.fromstring(CXN_XML))
    assert shape.macro == "m1"
    assert shape.c_nv_pr_id == "4"
    assert shape.c_nv_pr_name == "Connector 3"
    assert shape.bw_mode == "auto"
    assert shape.flip_v == "1"
    assert shape.offset == (100, 200)
    assert shape.extent == (300, 400)
    assert shape.preset_geometry == "line"
    assert (shape.line_width, shape.line_cap, shape.line_compound, shape.line_align) == (
        "9525",
        "flat",
        "sng",
        "ctr",
    )
    assert shape.head_end_type == "triangle"
    assert shape.tail_end_type == "none"
    assert shape.line_ref_color == "accent1"
    assert shape.font_ref_idx == "minor"
    assert shape.font_ref_color == "tx1"


def test_parse_connection_shape_rejects_other_elements():
    with pytest.raises(ValueError):
        parse_connection_shape(ET.fromstring("<sp/>"))


def test_connection_shape_round_trip():
    original = parse_connection_shape(ET.fromstring(CXN_XML))
    elem = connection_shape_element(original)
    reparsed = parse_connection_shape(ET.fromstring(ET.tostring(elem)))
    assert reparsed == original


def test_connection_shape_without_bw_mode_omits_attribute():
    shape = ShapeData(preset_geometry="line")
    elem = connection_shape_element(shape)
    sp_pr = _find(elem, XDR_NS, "spPr")
    assert "bwMode" not in sp_pr.attrib
    assert "flipV" not in _find(elem, A_NS, "xfrm").attrib
    assert parse_connection_shape(elem).bw_mode is None


def test_line_attributes_need_width_and_cap():
    shape = ShapeData(line_width="9525", line_compound="sng")
    ln = _find(connection_shape_element(shape), A_NS, "ln")
    assert ln.attrib == {}
    assert _find(ln, A_NS, "headEnd") is None


def test_shape_element_without_picture():
    shape = ShapeData(macro="", textlink="$A$1", c_nv_pr_id="2", c_nv_pr_name="Rect")
    elem = shape_element(shape)
    assert elem.tag == f"{{{XDR_NS}}}sp"
    assert elem.get("textlink") == "$A$1"
    assert _find(elem, A_NS, "blipFill") is None
    refs = [c.tag.rsplit("}", 1)[-1] for c in _find(elem, XDR_NS, "style")]
    assert refs == ["lnRef", "fillRef", "effectRef", "fontRef"]


def test_shape_element_with_picture():
    shape = ShapeData(dpi=96, rot_with_shape=1, blip_cstate="print")
    elem = shape_element(shape, "rId3")
    fill = _find(elem, A_NS, "blipFill")
    assert fill.get("dpi") == "96"
    assert fill.get("rotWithShape") == "1"
    blip = _find(fill, A_NS, "blip")
    assert blip.get(f"{{{R_NS}}}embed") == "rId3"
    assert blip.get("cstate") == "print"
    assert _find(fill, A_NS, "fillRect") is not None


def test_object_type_values_match_element_names():
    assert ObjectType("cxnSp") is ObjectType.CONNECTION_SHAPE
    assert ObjectType("pic") is ObjectType.PICTURE
    assert ObjectType("graphicFrame") is ObjectType.GRAPHIC_FRAME