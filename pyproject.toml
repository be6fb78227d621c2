[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinynet"
version = "0.1.0"
description = "Building blocks for small network services: timestamps, threads and a thread pool, buffered and asynchronous logging to rolling files, HTTP request parsing and responses, a memory pool model and a MySQL connection pool."
requires-python = ">=3.10"
dependencies = [
    "pymysql",
]
keywords = [
    "logging",
    "async-logging",
    "log-rotation",
    "thread-pool",
    "http",
    "http-parser",
    "memory-pool",
    "connection-pool",
    "mysql",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: System :: Logging",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Database",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tinynet"]

[tool.hatch.build.targets.sdist]
include = [
    "tinynet",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"
