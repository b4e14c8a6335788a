[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tomlast"
version = "0.1.0"
description = "An iterative, position-aware TOML parser that yields a syntax tree for each top-level expression"
requires-python = ">=3.10"
dependencies = []
keywords = ["toml", "parser", "ast", "syntax-tree", "configuration"]
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
    "Topic :: File Formats",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tomlast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
