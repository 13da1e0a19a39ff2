[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "discmeta"
version = "0.1.0"
description = "Audio CD metadata helpers: CDDB mirror lists, submission data and MusicBrainz disc lookups"
requires-python = ">=3.10"
dependencies = []
keywords = ["cd", "cddb", "gnudb", "xmcd", "musicbrainz", "discid", "metadata"]
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
    "Topic :: Multimedia :: Sound/Audio :: CD Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["discmeta"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
