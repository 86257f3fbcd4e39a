"""Archive container interface."""

from .base import Container, WriteProgress

__all__ = ["Container", "WriteProgress"]
