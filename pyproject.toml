[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clice"
version = "0.1.0"
description = "Cooperative tasks, synchronisation, file access and language-server data helpers"
requires-python = ">=3.10"
keywords = ["language-server", "lsp", "coroutines", "tasks", "semantic-tokens", "folding"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clice"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
