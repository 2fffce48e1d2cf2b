[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "connectx"
version = "0.1.0"
description = "WebSocket server for two-player Connect-X matches on 2D and 3D boards"
requires-python = ">=3.10"
keywords = ["connect-four", "connect-x", "board-game", "websocket", "game-server"]
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
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment :: Board Games",
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
connectx-server = "connectx.server:main"
connectx-client = "connectx.client:main"

[tool.hatch.build.targets.wheel]
packages = ["connectx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
