"""Entry transformers for the minify pipeline."""

from .base import EntryTransformer
from .webp import WebPTransformer

__all__ = ["EntryTransformer", "WebPTransformer"]
