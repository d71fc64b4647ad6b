[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chhoto"
version = "6.1.0"
description = "SQLite link storage and request handling for a small self-hosted URL shortener."
requires-python = ">=3.10"
dependencies = []
keywords = ["url-shortener", "shortener", "link-shortener", "sqlite", "self-hosted"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chhoto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
