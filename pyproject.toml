[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xlsxparts"
version = "0.1.0"
description = "Read and write individual XML parts of XLSX packages: data validations, document properties and drawings."
requires-python = ">=3.10"
dependencies = []
keywords = ["xlsx", "excel", "ooxml", "spreadsheet", "drawingml", "docprops"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial :: Spreadsheet",
    "Topic :: Text Processing :: Markup :: XML",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xlsxparts"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
