[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rangefetch"
version = "1.0.0"
description = "Multi-threaded HTTP downloader that fetches files in byte ranges and joins the parts"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "download", "range", "multithreaded", "downloader"]
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
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rangefetch = "rangefetch.downloader:main"

[tool.hatch.build.targets.wheel]
packages = ["rangefetch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
