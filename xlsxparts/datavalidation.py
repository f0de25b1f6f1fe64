"""Data validation rules applied to cells or ranges of a worksheet."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "ValidationType",
    "ValidationOperator",
    "ErrorStyle",
    "DataValidation",
    "cell_name",
    "parse_data_validation",
]


class ValidationType(Enum):
    """The kind of data a validation restricts a cell to."""

    NONE = "none"
    WHOLE = "whole"
    DECIMAL = "decimal"
    LIST = "list"
    DATE = "date"
    TIME = "time"
    TEXT_LENGTH = "textLength"
    CUSTOM = "custom"


class ValidationOperator(Enum):
    """The criterion by which a cell's data is validated."""

    BETWEEN = "between"
    NOT_BETWEEN = "notBetween"
    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUAL = "lessThanOrEqual"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqual"


class ErrorStyle(Enum):
    """The type of error dialog shown for invalid data."""

    STOP = "stop"
    WARNING = "warning"
    INFORMATION = "information"


def cell_name(row: int, col: int) -> str:
    """Return the A1-style name of the cell at 1-based ``row`` and ``col``."""
    if row < 1 or col < 1:
        raise ValueError(f"invalid cell position ({row}, {col})")
    letters = []
    n = col
    while n:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters)) + str(row)


def _strip_equals(formula: str) -> str:
    return formula[1:] if formula.startswith("=") else formula


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@dataclass
class DataValidation:
    """A validation rule together with the ranges it applies to."""

    validation_type: ValidationType = ValidationType.NONE
    validation_operator: ValidationOperator = ValidationOperator.BETWEEN
    formula1: str = ""
    formula2: str = ""
    allow_blank: bool = False
    error_style: ErrorStyle = ErrorStyle.STOP
    error_message: str = ""
    error_message_title: str = ""
    prompt_message: str = ""
    prompt_message_title: str = ""
    prompt_message_visible: bool = True
    error_message_visible: bool = True
    ranges: list[str] = field(default_factory=list)

    def set_formula1(self, formula: str) -> None:
        """Set the first formula, dropping a leading '='."""
        self.formula1 = _strip_equals(formula)

    def set_formula2(self, formula: str) -> None:
        """Set the second formula, dropping a leading '='."""
        self.formula2 = _strip_equals(formula)

    def set_error_message(self, error: str, title: str = "") -> None:
        """Set the error message and its title."""
        self.error_message = error
        self.error_message_title = title

    def set_prompt_message(self, prompt: str, title: str = "") -> None:
        """Set the prompt message and its title."""
        self.prompt_message = prompt
        self.prompt_message_title = title

    def add_cell(self, row: int, col: int) -> None:
        """Apply the validation to the single cell at ``row``, ``col``."""
        self.ranges.append(cell_name(row, col))

    def add_range(self, cell_range: str | tuple[int, int, int, int]) -> None:
        """Apply the validation to a range such as ``"A1:B5"``.

        A tuple ``(first_row, first_col, last_row, last_col)`` is accepted too.
        """
        if isinstance(cell_range, tuple):
            first_row, first_col, last_row, last_col = cell_range
            first = cell_name(first_row, first_col)
            last = cell_name(last_row, last_col)
            self.ranges.append(first if first == last else f"{first}:{last}")
            return
        text = cell_range.strip()
        if not text:
            raise ValueError("empty cell range")
        self.ranges.append(text)

    def to_element(self) -> ET.Element:
        """Return the ``dataValidation`` XML element for this rule."""
        elem = ET.Element("dataValidation")
        if self.validation_type is not ValidationType.NONE:
            elem.set("type", self.validation_type.value)
        if self.error_style is not ErrorStyle.STOP:
            elem.set("errorStyle", self.error_style.value)
        if self.validation_operator is not ValidationOperator.BETWEEN:
            elem.set("operator", self.validation_operator.value)
        if self.allow_blank:
            elem.set("allowBlank", "1")
        if self.prompt_message_visible:
            elem.set("showInputMessage", "1")
        if self.error_message_visible:
            elem.set("showErrorMessage", "1")
        if self.error_message_title:
            elem.set("errorTitle", self.error_message_title)
        if self.error_message:
            elem.set("error", self.error_message)
        if self.prompt_message_title:
            elem.set("promptTitle", self.prompt_message_title)
        if self.prompt_message:
            elem.set("prompt", self.prompt_message)
        elem.set("sqref", " ".join(self.ranges))
        if self.formula1:
            ET.SubElement(elem, "formula1").text = self.formula1
        if self.formula2:
            ET.SubElement(elem, "formula2").text = self.formula2
        return elem


def _lookup(enum_cls, text, default):
    try:
        return enum_cls(text)
    except ValueError:
        return default


def parse_data_validation(element: ET.Element) -> DataValidation:
    """Build a :class:`DataValidation` from a ``dataValidation`` element."""
    if _local_name(element.tag) != "dataValidation":
        raise ValueError(f"expected a dataValidation element, got {element.tag!r}")
    attrs = element.attrib
    validation = DataValidation()

    for part in attrs.get("sqref", "").split(" "):
        if part:
            validation.add_range(part)

    if "type" in attrs:
        validation.validation_type = _lookup(
            ValidationType, attrs["type"], ValidationType.NONE
        )
    if "errorStyle" in attrs:
        validation.error_style = _lookup(ErrorStyle, attrs["errorStyle"], ErrorStyle.STOP)
    if "operator" in attrs:
        validation.validation_operator = _lookup(
            ValidationOperator, attrs["operator"], ValidationOperator.BETWEEN
        )
    validation.allow_blank = "allowBlank" in attrs
    validation.prompt_message_visible = "showInputMessage" in attrs
    validation.error_message_visible = "showErrorMessage" in attrs

    validation.set_error_message(attrs.get("error", ""), attrs.get("errorTitle", ""))
    validation.set_prompt_message(attrs.get("prompt", ""), attrs.get("promptTitle", ""))

    for child in element:
        name = _local_name(child.tag)
        if name == "formula1":
            validation.set_formula1(child.text or "")
        elif name == "formula2":
            validation.set_formula2(child.text or "")
    return validation