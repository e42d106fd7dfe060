[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aircontrib"
version = "0.1.0"
description = "Building blocks for edge data pipelines: SQL insert statements, reading notifications, an in-memory property graph and Dgraph RDF rendering."
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "graph", "dgraph", "rdf", "notification", "iot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aircontrib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
