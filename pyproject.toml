[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "uringecho"
version = "0.1.0"
description = "A small TCP echo server and load-generating client, with the pooled data structures behind them"
requires-python = ">=3.10"
dependencies = []
keywords = ["echo", "tcp", "server", "client", "asyncio", "networking", "hash set", "slab", "pool"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
uringecho-server = "uringecho.server:main"
uringecho-client = "uringecho.client:main"

[tool.hatch.build.targets.wheel]
packages = ["uringecho"]

[tool.pytest.ini_options]
addopts = "-ra"
