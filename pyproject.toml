[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "echotui"
version = "0.1.0"
description = "Terminal UI building blocks: transcript rendering, layout primitives, a status line and a slash-command popup"
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["tui", "terminal", "transcript", "slash-commands", "rendering", "layout"]
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
    "Topic :: Software Development :: User Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["echotui"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
