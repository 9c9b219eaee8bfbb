"""Module namespace index."""

from .namespace_index import NamespaceIndex, BufferLike

__all__ = ["NamespaceIndex", "BufferLike"]
