"""Read and write data validations, document properties and drawing parts of XLSX packages."""

__version__ = "0.1.0"
__all__ = ["anchors", "datavalidation", "docprops", "drawing", "shapes"]