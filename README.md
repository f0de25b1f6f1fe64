# xlsxparts

Building blocks for reading and writing some of the XML parts inside an
`.xlsx` package. The package uses only the standard library. It works with
`xml.etree.ElementTree` elements and raw XML bytes.

## What it covers

- **Data validations** (`xlsxparts.datavalidation`): the `<dataValidation>`
  element of a worksheet. It provides the `DataValidation` dataclass, the
  `ValidationType`, `ValidationOperator` and `ErrorStyle` enums,
  `parse_data_validation` to read an existing element, and `cell_name` to turn
  a 1-based row and column into an A1-style name.
- **Document properties** (`xlsxparts.docprops`): `DocPropsApp` handles
  `docProps/app.xml` and `DocPropsCore` handles `docProps/core.xml`.
- **Shapes** (`xlsxparts.shapes`): anchor markers, positions and extents, and
  shape and connector data, with `Marker`, `ShapeData` and `ObjectType`, and
  functions such as `parse_marker`, `marker_element`,
  `parse_connection_shape`, `connection_shape_element` and `shape_element`.
- **Anchors** (`xlsxparts.anchors`): `AbsoluteAnchor`, `OneCellAnchor` and
  `TwoCellAnchor`, which place pictures, charts and shapes on a sheet.
- **Drawings** (`xlsxparts.drawing`): the `Drawing` part
  (`xl/drawings/drawingN.xml`). It holds its anchors, its `Relationship`
  entries, and lists of the chart paths and media files its anchors use.

## Installing

```
pip install .
```

## Examples

A data validation that limits a range to whole numbers:

```python
from xlsxparts.datavalidation import (
    DataValidation, ValidationType, ValidationOperator, parse_data_validation,
)

dv = DataValidation(ValidationType.WHOLE, ValidationOperator.BETWEEN)
dv.set_formula1("=1")          # a leading "=" is stripped
dv.set_formula2("10")
dv.set_error_message("Enter 1 to 10", "Out of range")
dv.add_range("A1:A20")
dv.add_cell(3, 2)              # "B3"

element = dv.to_element()      # an ElementTree element
again = parse_data_validation(element)
```

Document properties:

```python
from datetime import datetime
from xlsxparts.docprops import DocPropsApp, DocPropsCore

app = DocPropsApp()
app.add_heading_pair("Worksheets", 1)
app.add_part_title("Sheet1")
app.set_property("company", "Example Ltd")
app_xml = app.to_xml_bytes()

core = DocPropsCore()
core.set_property("title", "Quarterly report")
core_xml = core.to_xml_bytes(datetime(2024, 1, 1, 12, 0, 0))
```

`DocPropsApp` holds `manager` and `company`; `DocPropsCore` holds `title`,
`subject`, `keywords`, `description`, `category`, `status`, `created` and
`creator`. `set_property` raises `KeyError` for any other name, and setting an
empty value removes the property. `DocPropsCore.to_xml_bytes` writes `now`
(the current local time when omitted) as the modification time, and as the
creation time when `created` is not set. When no `creator` is set it writes
`xlsxparts` as creator and last modifier.

A drawing with one picture anchored to a cell:

```python
from xlsxparts.drawing import Drawing
from xlsxparts.anchors import OneCellAnchor

drawing = Drawing()
anchor = OneCellAnchor(drawing)
anchor.set_picture(png_bytes, "png")
xml = drawing.to_xml_bytes()   # also rebuilds drawing.relationships

loaded = Drawing(relationships=drawing.relationships)
loaded.load_xml_bytes(xml)
```

Loading a picture or chart anchor looks up its relationship id in the
drawing's `relationships`, so pass the entries of the drawing's
relationships part when you construct it; an unknown id raises `KeyError`.
Malformed XML given to `load_xml_bytes` raises `ValueError`.

## What it does not do

The package handles single parts only. It does not open or write the zip
container, and it has no workbook, worksheet, styles, shared strings or
relationships-file reader or writer. Charts are tracked only by their paths
and media files only by their bytes; the package does not read or write chart
XML or decode images.

## Running the tests

```
pip install .[test]
pytest
```