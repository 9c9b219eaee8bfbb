"""
Workspace

Orchestrates discovery, the namespace index and the import transformer for
one Haskell project directory. Every command re-populates the index when it
finishes, so the namespace stays consistent even when a command gives up
early.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .index.namespace_index import NamespaceIndex
from .shared.module import Module, ModuleKind, module_id, parse_module_name
from .transform.edits import apply_edit
from .transform.imports import dehydrate, hydrate, scan_imports
from .utils.config import Config, HASKELL_FILE_EXTENSION, HASKELL_FILE_GLOB
from .utils.io_utils import try_read_source_file, write_source_file

logger = logging.getLogger(__name__)

_MODULE_IDENTIFIER_RE = re.compile(r"[A-Z][A-Za-z0-9_'.]*")
_WORD_CHARS = re.compile(r"[A-Za-z0-9_'.]")
_SEGMENT_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*$")


@dataclass(frozen=True)
class Buffer:
    """Text of an open file. path is None for unsaved buffers."""
    path: Optional[Path]
    text: str


@dataclass(frozen=True)
class SearchItem:
    label: str
    description: Optional[str]
    module: Module


def text_at_cursor(text: str, line: int, column: int) -> Optional[str]:
    """Dotted word around a 1-based line/column position."""
    lines = text.split("\n")
    if not 1 <= line <= len(lines):
        return None
    current = lines[line - 1]
    index = column - 1
    if not 0 <= index < len(current) or not _WORD_CHARS.match(current[index]):
        return None
    start, end = index, index + 1
    while start > 0 and _WORD_CHARS.match(current[start - 1]):
        start -= 1
    while end < len(current) and _WORD_CHARS.match(current[end]):
        end += 1
    return current[start:end].strip(".")


class Workspace:
    """
    A Haskell project rooted at a directory.

    Owns the namespace index for the session and the current configuration
    snapshot.
    """

    def __init__(self, root: Union[Path, str], config: Optional[Config] = None,
                 index: Optional[NamespaceIndex] = None):
        self.root = Path(root).resolve()
        self.config = config if config is not None else Config()
        self.index = index if index is not None else NamespaceIndex()

    # PRIVATE

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return str(path)

    def get_module_contents(self, module: Module) -> Optional[str]:
        logger.debug(f"get_module_contents {module}")
        if module.kind is ModuleKind.VIRTUAL:
            logger.debug("Module has no source file")
            return None
        contents = try_read_source_file(module.uri)
        if contents is None:
            logger.debug(f"Module is missing source file {module.uri}")
        return contents

    def ask_source_dir(self, choice: Optional[Union[Path, str]] = None) -> Optional[Path]:
        """
        Source root for a new file.

        With a single known source root, that root. With several, choice must
        name one of them.
        """
        source_dirs = self.index.get_source_dirs()
        if not source_dirs:
            logger.debug("No Haskell source directories")
            return None
        if len(source_dirs) == 1:
            logger.debug(f"Found one Haskell source directory {source_dirs[0]}")
            return source_dirs[0]
        logger.debug(f"Found Haskell source directories {source_dirs}")
        if choice is None:
            logger.debug("No source directory selected")
            return None
        selected = self.resolve_path(choice)
        if selected not in source_dirs:
            logger.debug(f"Not a known source directory: {selected}")
            return None
        return selected

    # PUBLIC

    def resolve_path(self, path: Union[Path, str]) -> Path:
        """Absolute path; relative paths are taken from the workspace root."""
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    def discover(self) -> List[Path]:
        """Haskell files under the root, minus excluded paths."""
        files = []
        for path in self.root.rglob(HASKELL_FILE_GLOB):
            if not path.is_file():
                continue
            if self.config.is_excluded(Path(self._relative(path))):
                logger.debug(f"Excluded {path}")
                continue
            files.append(path)
        return sorted(files)

    def populate(self) -> bool:
        logger.debug("Looking for Haskell files..")
        files = self.discover()
        logger.debug(f"Found {len(files)} Haskell files")
        for path in files:
            module = Module.from_source_file(path)
            logger.debug(f"Adding module {module}")
            self.index.insert(module)
        self.index.prune(files)
        return True

    def search_modules(self, query: str = "") -> List[SearchItem]:
        """Physical modules whose id contains query."""
        items = []
        for module in self.index.get_all():
            description = self._relative(module.uri)
            label = f"Main ({description})" if module.is_main else module.id
            if query in label:
                items.append(SearchItem(label=label, description=description, module=module))
        items.sort(key=lambda item: item.label)
        self.populate()
        return items

    def create_module_file(self, module: Module, content: Optional[str] = None,
                           sourcedir: Optional[Union[Path, str]] = None) -> bool:
        logger.debug(f"create_module_file {module}")
        directory = self.ask_source_dir(sourcedir)
        if directory is None:
            logger.debug("Could not select a source directory")
            self.populate()
            return False

        path = Module.path(directory, module.name)
        if path.exists():
            logger.debug(f"File already exists {path}")
            self.populate()
            return False

        logger.debug(f"Creating file {path}")
        write_source_file(path, content or f"module {module.id} where\n")
        return self.populate()

    def add_submodule(self, parent: Module, shortname: str,
                      sourcedir: Optional[Union[Path, str]] = None) -> bool:
        logger.debug(f"add_submodule {parent} {shortname!r}")
        if not _SEGMENT_RE.match(shortname or ""):
            logger.debug(f"Not a module name segment: {shortname!r}")
            self.populate()
            return False
        return self.create_module_file(Module.create(parent.name + (shortname,)), sourcedir=sourcedir)

    def rename_module(self, module: Module, new_name: str,
                      sourcedir: Optional[Union[Path, str]] = None) -> bool:
        """Duplicate a module under a new name. The original file is kept."""
        logger.debug(f"rename_module {module} -> {new_name!r}")
        old_content = self.get_module_contents(module)
        if not old_content:
            logger.debug("Could not get module contents")
            self.populate()
            return False

        name = parse_module_name(new_name or "")
        if name is None:
            logger.debug(f"Not a module name: {new_name!r}")
            self.populate()
            return False

        new_content = old_content.replace(module.id, module_id(name), 1)
        return self.create_module_file(Module.create(name), new_content, sourcedir)

    def module_at(self, buffer: Buffer, line: int, column: int) -> Optional[Module]:
        """
        Physical module named by the identifier at a position.

        Tries the longest dotted prefix first, so `Data.Map.insert` finds
        `Data.Map`. A prefix that is an import alias of the buffer resolves to
        the imported module.
        """
        text = text_at_cursor(buffer.text, line, column)
        if not text:
            logger.debug("Could not get text at cursor")
            return None
        match = _MODULE_IDENTIFIER_RE.search(text)
        if not match:
            logger.debug(f"Could not find module identifier in text {text!r}")
            return None

        aliases = {}
        for _, imp in scan_imports(buffer.text.split("\n")):
            aliases.setdefault(imp.qualifier, imp.module_path)

        segments = match.group(0).strip(".").split(".")
        for end in range(len(segments), 0, -1):
            candidate = ".".join(segments[:end])
            for module_id_ in (candidate, aliases.get(candidate)):
                module = self.index.get(module_id_) if module_id_ else None
                if module is not None and module.is_physical:
                    return module
        logger.debug(f"Could not find module for identifier {match.group(0)!r}")
        return None

    def jump_to_module(self, buffer: Buffer, line: int, column: int) -> Optional[Path]:
        module = self.module_at(buffer, line, column)
        self.populate()
        return module.uri if module is not None else None

    def focus_module(self, buffer: Optional[Buffer]) -> Optional[Module]:
        """Module backing a buffer, for revealing it in the tree."""
        if (not self.config.reveal_focused or buffer is None or buffer.path is None
                or Path(buffer.path).suffix != HASKELL_FILE_EXTENSION):
            self.populate()
            return None
        module = self.index.get_by_file_path(self.resolve_path(buffer.path))
        if module is None:
            logger.debug(f"Could not find module for file {buffer.path}")
        self.populate()
        return module

    def hydrate_buffer(self, buffer: Buffer) -> Optional[Buffer]:
        edit = hydrate(buffer.text, self.config.hydrate_prefix)
        if edit is None:
            return None
        return Buffer(path=buffer.path, text=apply_edit(buffer.text, edit))

    def dehydrate_buffer(self, buffer: Buffer) -> Optional[Buffer]:
        edit = dehydrate(buffer.text, self.config.hydrate_prefix)
        if edit is None:
            return None
        return Buffer(path=buffer.path, text=apply_edit(buffer.text, edit))

    def _rewrite_file(self, path: Union[Path, str], rewrite, dry_run: bool) -> Optional[str]:
        path = self.resolve_path(path)
        text = try_read_source_file(path)
        if text is None:
            logger.debug(f"Could not read {path}")
            self.populate()
            return None
        result = rewrite(Buffer(path=path, text=text))
        if result is None:
            self.populate()
            return None
        if not dry_run:
            write_source_file(path, result.text)
        self.populate()
        return result.text

    def hydrate_file(self, path: Union[Path, str], dry_run: bool = False) -> Optional[str]:
        return self._rewrite_file(path, self.hydrate_buffer, dry_run)

    def dehydrate_file(self, path: Union[Path, str], dry_run: bool = False) -> Optional[str]:
        return self._rewrite_file(path, self.dehydrate_buffer, dry_run)

    def update_config(self, config: Config) -> bool:
        logger.debug(f"Previous config {self.config}")
        self.config = config
        logger.debug(f"Updated config {self.config}")
        return self.populate()

    def render_tree(self) -> List[str]:
        """Indented namespace hierarchy, virtual modules in parentheses."""
        lines: List[str] = []

        def walk(parent: Optional[Module], depth: int) -> None:
            for module in self.index.get_children(parent):
                label = module.shortname
                if module.is_main and len(module.name) > 1 and module.uri is not None:
                    label = self._relative(module.uri)
                if module.kind is ModuleKind.VIRTUAL:
                    label = f"({label})"
                lines.append("  " * depth + label)
                walk(module, depth + 1)

        walk(None, 0)
        return lines
