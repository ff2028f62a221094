[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "softint"
version = "0.1.0"
description = "Software models of fixed-width integer arithmetic intrinsics, byte-buffer routines and stack probes, with a random test-vector generator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "integer",
    "intrinsics",
    "arithmetic",
    "division",
    "overflow",
    "128-bit",
    "stack-probe",
    "test-vectors",
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
    "Topic :: Software Development :: Libraries",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
softint-casegen = "softint.casegen:main"

[tool.hatch.build.targets.wheel]
packages = ["softint"]

[tool.hatch.build.targets.sdist]
include = ["softint", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
