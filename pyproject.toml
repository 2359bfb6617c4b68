[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "niitools"
version = "0.3.0"
description = "Parental control master keys for Nintendo consoles, the V1 ticket extension format and a TODO scanner for monorepos."
requires-python = ">=3.10"
keywords = ["nintendo", "ticket", "binary-format", "parsing", "master-key", "parental-control", "todo"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
forja = "niitools.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["niitools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
