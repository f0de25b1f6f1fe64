import xml.etree.ElementTree as ET
from datetime import datetime

import pytest

from xlsxparts.docprops import DocPropsApp, DocPropsCore

EXT = "{http://schemas.openxmlformats.org/officeDocument/2006/extended-properties}"
VT = "{http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes}"
CP = "{http://schemas.openxmlformats.org/package/2006/metadata/core-properties}"
DC = "{http://purl.org/dc/elements/1.1/}"
DCTERMS = "{http://purl.org/dc/terms/}"
XSI = "{http://www.w3.org/2001/XMLSchema-instance}"


def test_app_rejects_unknown_property():
    app = DocPropsApp()
    with pytest.raises(KeyError):
        app.set_property("title", "x")


def test_app_set_get_and_remove():
    app = DocPropsApp()
    app.set_property("company", "Acme")
    app.set_property("manager", "Bob")
    assert app.get_property("company") == "Acme"
    assert app.property_names() == ["company", "manager"]
    app.set_property("company", "")
    assert app.get_property("company") == ""
    assert app.property_names() == ["manager"]


def test_app_fixed_fields_and_declaration():
    data = DocPropsApp().to_xml_bytes()
    assert data.startswith(b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>')
    root = ET.fromstring(data)
    assert root.tag == EXT + "Properties"
    assert root.find(EXT + "Application").text == "Microsoft Excel"
    assert root.find(EXT + "AppVersion").text == "12.0000"
    assert root.find(EXT + "Manager") is None
    company = root.find(EXT + "Company")
    assert (company.text or "") == ""


def test_app_heading_pairs_and_titles():
    app = DocPropsApp()
    app.add_heading_pair("Worksheets", 2)
    app.add_part_title("Sheet1")
    app.add_part_title("Data")
    root = ET.fromstring(app.to_xml_bytes())
    vector = root.find(EXT + "HeadingPairs").find(VT + "vector")
    assert vector.get("size") == str(2 * len(app.heading_pairs))
    assert vector.get("baseType") == "variant"
    assert [e.text for e in vector.iter(VT + "lpstr")] == ["Worksheets"]
    assert [e.text for e in vector.iter(VT + "i4")] == ["2"]
    titles = root.find(EXT + "TitlesOfParts").find(VT + "vector")
    assert titles.get("size") == "2"
    assert [e.text for e in titles] == ["Sheet1", "Data"]


def test_app_round_trip():
    app = DocPropsApp()
    app.set_property("manager", "Alice")
    app.set_property("company", "Example Ltd")
    loaded = DocPropsApp()
    loaded.load_xml_bytes(app.to_xml_bytes())
    assert loaded.get_property("manager") == "Alice"
    assert loaded.get_property("company") == "Example Ltd"


def test_app_load_without_company_text_leaves_it_unset():
    loaded = DocPropsApp()
    loaded.load_xml_bytes(DocPropsApp().to_xml_bytes())
    assert loaded.property_names() == []


def test_app_load_malformed_raises():
    with pytest.raises(ValueError):
        DocPropsApp().load_xml_bytes(b"<Properties><Company>")


def test_core_rejects_unknown_property():
    with pytest.raises(KeyError):
        DocPropsCore().set_property("company", "x")


def test_core_default_creator_and_times():
    now = datetime(2020, 5, 6, 7, 8, 9, 123)
    root = ET.fromstring(DocPropsCore().to_xml_bytes(now))
    assert root.tag == CP + "coreProperties"
    creator = root.find(DC + "creator").text
    assert root.find(CP + "lastModifiedBy").text == creator
    created = root.find(DCTERMS + "created")
    modified = root.find(DCTERMS + "modified")
    assert created.get(XSI + "type") == "dcterms:W3CDTF"
    assert modified.text == "2020-05-06T07:08:09"
    assert created.text == modified.text
    assert root.find(DC + "title") is None


def test_core_writes_set_properties():
    core = DocPropsCore()
    core.set_property("creator", "Jane")
    core.set_property("status", "Draft")
    core.set_property("created", "2019-01-01T00:00:00Z")
    root = ET.fromstring(core.to_xml_bytes(datetime(2021, 1, 1)))
    assert root.find(DC + "creator").text == "Jane"
    assert root.find(CP + "lastModifiedBy").text == "Jane"
    assert root.find(CP + "contentStatus").text == "Draft"
    assert root.find(DCTERMS + "created").text == "2019-01-01T00:00:00Z"


def test_core_round_trip():
    core = DocPropsCore()
    values = {
        "title": "Report",
        "subject": "Sales",
        "keywords": "q1 q2",
        "description": "Quarterly figures",
        "category": "Finance",
        "status": "Final",
        "created": "2018-03-04T05:06:07Z",
        "creator": "Sam",
    }
    for key, value in values.items():
        core.set_property(key, value)
    loaded = DocPropsCore()
    loaded.load_xml_bytes(core.to_xml_bytes())
    assert loaded.property_names() == sorted(values)
    for key, value in values.items():
        assert loaded.get_property(key) == value


def test_core_load_ignores_wrong_namespace():
    data = (
        b'<cp:coreProperties xmlns:cp="'
        + CP[1:-1].encode()
        + b'"><cp:title>Nope</cp:title><cp:keywords>k</cp:keywords></cp:coreProperties>'
    )
    core = DocPropsCore()
    core.load_xml_bytes(data)
    assert core.get_property("title") == ""
    assert core.get_property("keywords") == "k"


def test_core_load_malformed_raises():
    with pytest.raises(ValueError):
        DocPropsCore().load_xml_bytes(b"not xml")