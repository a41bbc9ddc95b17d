[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "movieapi"
version = "0.1.0"
description = "A small HTTP API serving movies, ratings, cast and crew from CSV files"
requires-python = ">=3.10"
keywords = ["movies", "ratings", "csv", "rest", "api", "flask", "jsend", "prometheus"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
movieapi = "movieapi.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["movieapi"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
