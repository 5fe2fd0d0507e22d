[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "countermcp"
version = "0.1.0"
description = "A small Model Context Protocol server over streamable HTTP exposing a shared counter, resources and prompts"
requires-python = ">=3.10"
keywords = ["mcp", "model-context-protocol", "json-rpc", "sse", "aiohttp", "counter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "aiohttp>=3.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
countermcp = "countermcp.server:main"

[tool.hatch.build.targets.wheel]
packages = ["countermcp"]

[tool.hatch.build.targets.sdist]
include = ["countermcp", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
