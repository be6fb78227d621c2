"""Building blocks for small network services: timestamps, threads, logging, HTTP parsing, a memory pool and a MySQL connection pool."""

__version__ = "0.1.0"