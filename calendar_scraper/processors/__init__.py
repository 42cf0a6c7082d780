"""Processors for cleaning extracted calendar text."""

from .text_normalizer import TextNormalizer

__all__ = ["TextNormalizer"]
