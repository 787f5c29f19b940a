[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icongrabber"
version = "0.1.0"
description = "Search SteamGridDB for game artwork and turn it into title icons"
requires-python = ">=3.10"
keywords = ["icons", "steamgriddb", "artwork", "game", "grid", "images"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "requests>=2.28",
    "pillow>=9.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
icongrabber = "icongrabber.client:main"

[tool.hatch.build.targets.wheel]
packages = ["icongrabber"]

[tool.hatch.build.targets.sdist]
include = ["icongrabber", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
