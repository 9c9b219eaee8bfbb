"""
Shared components: module data model, source locations, errors.
"""

from .source_location import SourceLocation
from .errors import Error, ErrorReporter, HsModulesError, ConfigError, ImportParseError
from .module import (
    Module, ModuleKind, ModuleName, ModuleId,
    module_id, parse_module_name, module_name_from_path,
)
