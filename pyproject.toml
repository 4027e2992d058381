[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pataro"
version = "0.1.0"
description = "A small terminal roguelike: dungeon levels, monsters, items and spells"
requires-python = ">=3.10"
keywords = ["roguelike", "game", "terminal", "dungeon", "curses"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pataro = "pataro.app:main"

[tool.hatch.build.targets.wheel]
packages = ["pataro"]

[tool.pytest.ini_options]
addopts = "-ra"
