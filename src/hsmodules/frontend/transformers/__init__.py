"""
Parse tree transformers
"""

from .import_line import ImportLine, ImportLineTransformer

__all__ = ["ImportLine", "ImportLineTransformer"]
