[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boilerdb"
version = "0.1.0"
description = "Schema metadata, relationship discovery, PostgreSQL type mapping and import bookkeeping for ORM code generation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "orm",
    "code-generation",
    "schema",
    "relationships",
    "postgresql",
    "database",
]
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
    "Topic :: Database",
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["boilerdb"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
