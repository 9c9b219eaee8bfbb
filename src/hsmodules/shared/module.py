"""
Module Data Model

Haskell module namespace nodes - shared between the index, the workspace
and the import transformer. These types are pure data structures.

A module name is a tuple of capitalized segments, e.g. ('Data', 'Map').
A module is PHYSICAL when a source file backs it and VIRTUAL when it only
exists because some descendant is physical (e.g. 'Data' when only
'Data.Map' has a file).
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..utils.config import HASKELL_FILE_EXTENSION, MAIN_MODULE_NAME, MODULE_SEPARATOR
from ..utils.io_utils import try_read_source_file


ModuleName = Tuple[str, ...]
ModuleId = str

_SEGMENT_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*$")
_MODULE_HEADER_RE = re.compile(
    r"^module\s+([A-Z][A-Za-z0-9_']*(?:\.[A-Z][A-Za-z0-9_']*)*)", re.MULTILINE
)


class ModuleKind(Enum):
    """Tagged variant of a namespace node."""
    PHYSICAL = "physical"
    VIRTUAL = "virtual"


def module_id(name: ModuleName) -> ModuleId:
    """Canonical dotted form of a module name."""
    return MODULE_SEPARATOR.join(name)


def parse_module_name(text: str) -> Optional[ModuleName]:
    """
    Parse a dotted module identifier into a module name.

    Returns None unless every segment is a capitalized Haskell identifier.
    """
    parts = tuple(text.split(MODULE_SEPARATOR))
    if not parts or not all(_SEGMENT_RE.match(p) for p in parts):
        return None
    return parts


def module_name_from_path(sourcedir: Union[Path, str], path: Union[Path, str]) -> Optional[ModuleName]:
    """
    Derive a module name from a file below a source root.

    src/Data/Map/Strict.hs under src -> ('Data', 'Map', 'Strict')
    """
    try:
        relative = Path(path).relative_to(Path(sourcedir))
    except ValueError:
        return None
    if relative.suffix != HASKELL_FILE_EXTENSION:
        return None
    parts = relative.with_suffix("").parts
    if not parts or not all(_SEGMENT_RE.match(p) for p in parts):
        return None
    return tuple(parts)


@dataclass(frozen=True)
class Module:
    """
    A node of the module namespace.

    - name: Module path as tuple (e.g., ('Data', 'Map'))
    - uri: Backing source file (None for virtual modules)
    - sourcedir: Root directory the file was found under
    """
    name: ModuleName
    uri: Optional[Path] = None
    sourcedir: Optional[Path] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Module name must have at least one segment")

    @property
    def id(self) -> ModuleId:
        return module_id(self.name)

    @property
    def shortname(self) -> str:
        return self.name[-1]

    @property
    def parent(self) -> Optional[ModuleId]:
        if len(self.name) == 1:
            return None
        return module_id(self.name[:-1])

    @property
    def kind(self) -> ModuleKind:
        return ModuleKind.PHYSICAL if self.uri is not None else ModuleKind.VIRTUAL

    @property
    def is_physical(self) -> bool:
        return self.kind is ModuleKind.PHYSICAL

    @property
    def is_main(self) -> bool:
        return self.name[0] == MAIN_MODULE_NAME

    def __str__(self) -> str:
        """Human-readable representation"""
        if self.uri is not None:
            return f"Module({self.id}, {self.uri})"
        return f"Module({self.id}, virtual)"

    @staticmethod
    def sort_key(module: "Module") -> Tuple[str, str]:
        """Siblings order by shortname (case-sensitive), then by id."""
        return (module.shortname, module.id)

    @classmethod
    def create(cls, name: ModuleName) -> "Module":
        """A virtual module for the given name."""
        return cls(name=tuple(name))

    @classmethod
    def ancestors(cls, name: ModuleName) -> List["Module"]:
        """Virtual modules for every strict prefix of name, shortest first."""
        return [cls.create(name[:i]) for i in range(1, len(name))]

    @staticmethod
    def path(sourcedir: Union[Path, str], name: ModuleName) -> Path:
        """Location of the source file for name under sourcedir."""
        directory = Path(sourcedir).joinpath(*name[:-1])
        return directory / f"{name[-1]}{HASKELL_FILE_EXTENSION}"

    @classmethod
    def from_source_file(cls, path: Union[Path, str], sourcedir: Optional[Path] = None) -> "Module":
        """
        Build the physical module for a discovered source file.

        The name comes from the `module X.Y where` header. Without a header
        (or with header `Main`) the file is an executable entry point and is
        named ('Main', <path>) so several of them can coexist. When no source
        root is given, it is derived by stripping the module's relative path
        from the file path.
        """
        path = Path(path)
        content = try_read_source_file(path) or ""
        match = _MODULE_HEADER_RE.search(content)
        header = match.group(1) if match else MAIN_MODULE_NAME

        if header == MAIN_MODULE_NAME:
            return cls(name=(MAIN_MODULE_NAME, str(path)), uri=path, sourcedir=sourcedir)

        name = tuple(header.split(MODULE_SEPARATOR))
        if sourcedir is None:
            stem_parts = path.with_suffix("").parts
            if len(stem_parts) > len(name) and stem_parts[-len(name):] == name:
                sourcedir = Path(*stem_parts[:-len(name)])
        return cls(name=name, uri=path, sourcedir=sourcedir)
