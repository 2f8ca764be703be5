# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging, caller-side retry, rich table rendering

from . import logging

__all__ = [
    "logging",
]
