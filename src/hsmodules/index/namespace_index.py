"""
Module Namespace Index

Maps dotted module ids to modules, including synthesized virtual ancestors,
and answers hierarchy and lookup queries.

Invariants kept after every call to insert/prune:
- closure: every strict ancestor of an indexed module is indexed
- uniqueness: one module per id; physical inserts replace virtual placeholders
- ordering: children are returned sorted by shortname
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Set, Union

from ..shared.module import Module, ModuleId

logger = logging.getLogger(__name__)


class BufferLike(Protocol):
    """Anything backed by a file on disk (an open editor buffer)."""
    path: Optional[Path]


class NamespaceIndex:
    """
    Module namespace index.

    One instance per workspace session. Lookups never raise: a missing entry
    is reported as None (or an empty list).
    """

    def __init__(self):
        self.modules: Dict[ModuleId, Module] = {}
        self.file_index: Dict[Path, ModuleId] = {}
        self.source_dirs: Set[Path] = set()

    def __len__(self) -> int:
        return len(self.modules)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self.modules

    def __iter__(self) -> Iterator[Module]:
        return iter(list(self.modules.values()))

    def get(self, module_id: ModuleId) -> Optional[Module]:
        return self.modules.get(module_id)

    def get_by_file_path(self, file_path: Union[Path, str]) -> Optional[Module]:
        module_id = self.file_index.get(Path(file_path))
        return self.get(module_id) if module_id is not None else None

    def get_by_editor(self, buffer: BufferLike) -> Optional[Module]:
        if buffer is None or buffer.path is None:
            return None
        return self.get_by_file_path(buffer.path)

    def get_children(self, parent: Optional[Module] = None) -> List[Module]:
        """
        Children of parent, or top-level modules when parent is None.

        Full scan over the index; no child lists are maintained.
        """
        if parent is None:
            children = [m for m in self.modules.values() if len(m.name) == 1]
        else:
            children = [m for m in self.modules.values() if m.parent == parent.id]
        children.sort(key=Module.sort_key)
        return children

    def get_parent(self, child: Module) -> Optional[Module]:
        return self.modules.get(child.parent) if child.parent else None

    def get_all(self) -> List[Module]:
        """Physical modules only, in insertion order."""
        return [m for m in self.modules.values() if m.is_physical]

    def get_source_dirs(self) -> List[Path]:
        return sorted(self.source_dirs)

    def insert(self, module: Module) -> None:
        previous = self.modules.get(module.id)
        self.modules[module.id] = module

        if module.sourcedir is not None:
            self.source_dirs.add(module.sourcedir)

        if module.uri is not None:
            if previous is not None and previous.uri is not None and previous.uri != module.uri:
                self.file_index.pop(previous.uri, None)
            # The file used to declare another module (its header changed).
            stale_id = self.file_index.get(module.uri)
            if stale_id is not None and stale_id != module.id:
                stale = self.modules.get(stale_id)
                if stale is not None and stale.uri == module.uri:
                    logger.debug(f"{module.uri} now declares {module.id}, not {stale_id}")
                    self.modules[stale_id] = Module.create(stale.name)
            self.file_index[module.uri] = module.id

        for ancestor in Module.ancestors(module.name):
            if ancestor.id not in self.modules:
                logger.debug(f"Synthesizing virtual module {ancestor.id}")
                self.modules[ancestor.id] = ancestor

    def prune(self, live_paths: Iterable[Union[Path, str]]) -> List[ModuleId]:
        """
        Reconcile the index with the files found by the latest discovery pass.

        Physical modules whose file is not in live_paths are dropped, or turned
        back into virtual modules while they still have indexed descendants.
        Virtual modules left without any physical descendant are dropped.

        Returns the ids that were removed.
        """
        live = {Path(p) for p in live_paths}
        for path, module_id in list(self.file_index.items()):
            if path in live:
                continue
            del self.file_index[path]
            module = self.modules.get(module_id)
            if module is not None and module.uri == path:
                logger.debug(f"Source file for {module_id} is gone: {path}")
                self.modules[module_id] = Module.create(module.name)

        # Keep every physical module and all of its ancestors.
        keep: Set[ModuleId] = set()
        for module in self.modules.values():
            if module.is_physical:
                keep.add(module.id)
                keep.update(a.id for a in Module.ancestors(module.name))

        removed = [module_id for module_id in self.modules if module_id not in keep]
        for module_id in removed:
            del self.modules[module_id]

        self.source_dirs = {m.sourcedir for m in self.modules.values() if m.sourcedir is not None}
        if removed:
            logger.debug(f"Pruned modules: {removed}")
        return removed
