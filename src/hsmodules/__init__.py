"""
hsmodules: Haskell module namespace index and import hydration.
"""

from .shared.module import Module, ModuleKind, module_id, parse_module_name, module_name_from_path
from .index.namespace_index import NamespaceIndex
from .transform import hydrate, dehydrate, apply_edit, InsertText, ReplaceContent
from .utils.config import Config, load_config
from .workspace import Buffer, Workspace

__version__ = "0.1.0"

__all__ = [
    "Module",
    "ModuleKind",
    "module_id",
    "parse_module_name",
    "module_name_from_path",
    "NamespaceIndex",
    "hydrate",
    "dehydrate",
    "apply_edit",
    "InsertText",
    "ReplaceContent",
    "Config",
    "load_config",
    "Buffer",
    "Workspace",
]
