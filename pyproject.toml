[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "procyon"
version = "0.1.0"
description = "Notebook storage for folders and memos kept in a single SQLite file"
requires-python = ">=3.10"
dependencies = []
keywords = ["notes", "memo", "notebook", "sqlite", "markdown"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: News/Diary",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["procyon"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
