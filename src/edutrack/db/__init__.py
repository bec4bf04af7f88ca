# src/edutrack/db/__init__.py
# Don't import session on package import (it builds the engine)
from .base import Base  # safe to import

__all__ = ["Base"]
