[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plumbline"
version = "0.1.0"
description = "Types for agentic-coding maturity assessment and a parser for CI workflow files"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["maturity", "assessment", "ci", "github-actions", "workflow", "agents"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["plumbline"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
