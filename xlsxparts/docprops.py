"""Document property parts of a workbook package: ``docProps/app.xml`` and ``docProps/core.xml``."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime

__all__ = ["DocPropsApp", "DocPropsCore"]

_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

_EXT_NS = "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
_VT_NS = "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes"

_CP_NS = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
_DC_NS = "http://purl.org/dc/elements/1.1/"
_DCTERMS_NS = "http://purl.org/dc/terms/"
_DCMITYPE_NS = "http://purl.org/dc/dcmitype/"
_XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

DEFAULT_CREATOR = "xlsxparts"


def _serialize(root: ET.Element) -> bytes:
    return (_DECLARATION + ET.tostring(root, encoding="unicode")).encode("utf-8")


def _parse(data: bytes, what: str) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as exc:
        raise ValueError(f"malformed {what} XML: {exc}") from exc


def _split_tag(tag: str) -> tuple[str, str]:
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return "", tag


def _text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    child = ET.SubElement(parent, tag)
    child.text = text
    return child


def _store(properties: dict[str, str], keys: frozenset[str], name: str, value: str) -> None:
    if name not in keys:
        raise KeyError(f"unsupported property {name!r}")
    if value:
        properties[name] = value
    else:
        properties.pop(name, None)


class DocPropsApp:
    """The extended (application) properties part."""

    KEYS = frozenset({"manager", "company"})

    def __init__(self) -> None:
        self._properties: dict[str, str] = {}
        self.titles_of_parts: list[str] = []
        self.heading_pairs: list[tuple[str, int]] = []

    def add_part_title(self, title: str) -> None:
        """Append a title to the list of part titles."""
        self.titles_of_parts.append(title)

    def add_heading_pair(self, name: str, value: int) -> None:
        """Append a heading pair such as ``("Worksheets", 3)``."""
        self.heading_pairs.append((name, int(value)))

    def set_property(self, name: str, value: str) -> None:
        """Set property ``name``; an empty value removes it.

        Raises :class:`KeyError` for a name this part does not hold.
        """
        _store(self._properties, self.KEYS, name, value)

    def get_property(self, name: str) -> str:
        """Return the value of property ``name``, or an empty string."""
        return self._properties.get(name, "")

    def property_names(self) -> list[str]:
        """Return the names of the properties that are set, in sorted order."""
        return sorted(self._properties)

    def to_xml_bytes(self) -> bytes:
        """Serialize the part to XML bytes."""
        root = ET.Element("Properties", {"xmlns": _EXT_NS, "xmlns:vt": _VT_NS})
        _text(root, "Application", "Microsoft Excel")
        _text(root, "DocSecurity", "0")
        _text(root, "ScaleCrop", "false")

        headings = ET.SubElement(root, "HeadingPairs")
        vector = ET.SubElement(
            headings,
            "vt:vector",
            {"size": str(len(self.heading_pairs) * 2), "baseType": "variant"},
        )
        for name, value in self.heading_pairs:
            _text(ET.SubElement(vector, "vt:variant"), "vt:lpstr", name)
            _text(ET.SubElement(vector, "vt:variant"), "vt:i4", str(value))

        titles = ET.SubElement(root, "TitlesOfParts")
        vector = ET.SubElement(
            titles,
            "vt:vector",
            {"size": str(len(self.titles_of_parts)), "baseType": "lpstr"},
        )
        for title in self.titles_of_parts:
            _text(vector, "vt:lpstr", title)

        if "manager" in self._properties:
            _text(root, "Manager", self._properties["manager"])
        # Company is always present in files written by spreadsheet applications.
        _text(root, "Company", self._properties.get("company", ""))
        _text(root, "LinksUpToDate", "false")
        _text(root, "SharedDoc", "false")
        _text(root, "HyperlinksChanged", "false")
        _text(root, "AppVersion", "12.0000")
        return _serialize(root)

    def load_xml_bytes(self, data: bytes) -> None:
        """Read the manager and company properties from XML bytes."""
        root = _parse(data, "app properties")
        for elem in root.iter():
            _, local = _split_tag(elem.tag)
            if local == "Manager":
                self.set_property("manager", elem.text or "")
            elif local == "Company":
                self.set_property("company", elem.text or "")


class DocPropsCore:
    """The core properties part."""

    KEYS = frozenset(
        {
            "title",
            "subject",
            "keywords",
            "description",
            "category",
            "status",
            "created",
            "creator",
        }
    )

    _LOAD_MAP = {
        (_DC_NS, "subject"): "subject",
        (_DC_NS, "title"): "title",
        (_DC_NS, "creator"): "creator",
        (_DC_NS, "description"): "description",
        (_CP_NS, "keywords"): "keywords",
        (_DCTERMS_NS, "created"): "created",
        (_CP_NS, "category"): "category",
        (_CP_NS, "contentStatus"): "status",
    }

    def __init__(self) -> None:
        self._properties: dict[str, str] = {}

    def set_property(self, name: str, value: str) -> None:
        """Set property ``name``; an empty value removes it.

        Raises :class:`KeyError` for a name this part does not hold.
        """
        _store(self._properties, self.KEYS, name, value)

    def get_property(self, name: str) -> str:
        """Return the value of property ``name``, or an empty string."""
        return self._properties.get(name, "")

    def property_names(self) -> list[str]:
        """Return the names of the properties that are set, in sorted order."""
        return sorted(self._properties)

    def to_xml_bytes(self, now: datetime | None = None) -> bytes:
        """Serialize the part to XML bytes.

        ``now`` is the modification time written; it also stands in for the
        creation time when none is set. It defaults to the current local time.
        """
        stamp = (now or datetime.now()).replace(microsecond=0).isoformat()
        props = self._properties
        creator = props.get("creator", DEFAULT_CREATOR)

        root = ET.Element(
            "cp:coreProperties",
            {
                "xmlns:cp": _CP_NS,
                "xmlns:dc": _DC_NS,
                "xmlns:dcterms": _DCTERMS_NS,
                "xmlns:dcmitype": _DCMITYPE_NS,
                "xmlns:xsi": _XSI_NS,
            },
        )
        if "title" in props:
            _text(root, "dc:title", props["title"])
        if "subject" in props:
            _text(root, "dc:subject", props["subject"])
        _text(root, "dc:creator", creator)
        if "keywords" in props:
            _text(root, "cp:keywords", props["keywords"])
        if "description" in props:
            _text(root, "dc:description", props["description"])
        _text(root, "cp:lastModifiedBy", creator)

        created = _text(root, "dcterms:created", props.get("created", stamp))
        created.set("xsi:type", "dcterms:W3CDTF")
        modified = _text(root, "dcterms:modified", stamp)
        modified.set("xsi:type", "dcterms:W3CDTF")

        if "category" in props:
            _text(root, "cp:category", props["category"])
        if "status" in props:
            _text(root, "cp:contentStatus", props["status"])
        return _serialize(root)

    def load_xml_bytes(self, data: bytes) -> None:
        """Read the known core properties from XML bytes."""
        root = _parse(data, "core properties")
        for elem in root.iter():
            key = self._LOAD_MAP.get(_split_tag(elem.tag))
            if key is not None:
                self.set_property(key, elem.text or "")