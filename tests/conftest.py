"""
Pytest configuration and shared fixtures for all hsmodules tests.

Provides a fresh namespace index per test and a small Haskell project
written under tmp_path for workspace and CLI tests.
"""

import sys
import pytest
from typing import Callable, Dict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from hsmodules.index.namespace_index import NamespaceIndex
from hsmodules.shared.module import Module
from hsmodules.utils.config import Config
from hsmodules.workspace import Workspace


# =============================================================================
# Sample project
# =============================================================================

SAMPLE_PROJECT: Dict[str, str] = {
    "src/Data/Map.hs": "module Data.Map where\n\nempty = ()\n",
    "src/Data/Map/Strict.hs": "module Data.Map.Strict\n  ( insert\n  ) where\n\ninsert = ()\n",
    "src/Control/Monad/Extra.hs": "{-# LANGUAGE LambdaCase #-}\nmodule Control.Monad.Extra where\n",
    "app/Main.hs": (
        "module Main where\n"
        "\n"
        "import qualified Data.Map as M\n"
        "import Data.Map.Strict (insert)\n"
        "import Control.Monad.Extra\n"
        "\n"
        "main :: IO ()\n"
        "main = print (M.empty, insert)\n"
    ),
    "dist-newstyle/build/Generated.hs": "module Generated where\n",
}


# =============================================================================
# Function-scoped fixtures (default - one per test)
# =============================================================================

@pytest.fixture
def index():
    """Fresh, empty namespace index."""
    return NamespaceIndex()


@pytest.fixture
def physical():
    """Factory for physical modules under a fake source root."""
    def _physical(module_id: str, sourcedir: str = "/project/src") -> Module:
        name = tuple(module_id.split("."))
        return Module(name=name, uri=Module.path(Path(sourcedir), name), sourcedir=Path(sourcedir))
    return _physical


@pytest.fixture
def write_project(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """Factory writing a dict of relative path -> content under tmp_path."""
    def _write(files: Dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path.resolve()
    return _write


@pytest.fixture
def project_root(write_project) -> Path:
    """The sample Haskell project on disk."""
    return write_project(SAMPLE_PROJECT)


@pytest.fixture
def workspace(project_root) -> Workspace:
    """Populated workspace over the sample project."""
    ws = Workspace(project_root, Config())
    ws.populate()
    return ws


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
