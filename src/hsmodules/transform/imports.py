"""
Import Hydration

hydrate: add a block of uniquely aliased qualified imports
(`import qualified Data.Map as Q_1`, ...) before the first import and point
every qualified reference in the body at those aliases.

dehydrate: the inverse. Hydrated imports are removed (or collapsed to a
minimal `import M` when nothing else imports M) and references go back to
the qualifier of the import they came from.

Both are line based: only single-line import declarations recognized by the
import grammar take part.
"""

import logging
import re
from typing import Dict, List, Optional, Pattern, Set, Tuple

from ..frontend.parser import parse_import_line
from ..frontend.transformers.import_line import ImportLine
from ..utils.config import HYDRATED_ALIAS_SEPARATOR
from .edits import InsertText, ReplaceContent, TextEdit

logger = logging.getLogger(__name__)

# Unqualified name after the last dot: variable, constructor or operator.
_NAME = r"[a-z_][A-Za-z0-9_']*|[A-Z][A-Za-z0-9_']*|[!#$%&*+./<=>?@\\^|~:-]+"

# Longest dotted prefix wins, so `Data.Map.Strict.insert` has qualifier `Data.Map.Strict`.
_QUALIFIED_NAME_RE = re.compile(rf"(?<![\w'.])((?:[A-Z][A-Za-z0-9_']*\.)+)({_NAME})")

ScannedImport = Tuple[int, ImportLine]

_MODULE_HEADER_START_RE = re.compile(r"^module\b")
_WHERE_RE = re.compile(r"\bwhere\b")


def hydrated_alias(prefix: str, sequence: int) -> str:
    return f"{prefix}{HYDRATED_ALIAS_SEPARATOR}{sequence}"


def hydrated_import(prefix: str, module_path: str, sequence: int) -> str:
    return f"import qualified {module_path} as {hydrated_alias(prefix, sequence)}"


def hydrated_alias_regex(prefix: str) -> Pattern[str]:
    return re.compile(rf"^{re.escape(prefix)}{HYDRATED_ALIAS_SEPARATOR}(\d+)$")


def hydrated_reference_regex(prefix: str) -> Pattern[str]:
    return re.compile(
        rf"(?<![\w'.])({re.escape(prefix)}{HYDRATED_ALIAS_SEPARATOR}\d+)\.({_NAME})"
    )


def scan_imports(lines: List[str]) -> List[ScannedImport]:
    """Recognized import declarations with their 0-based line numbers."""
    scanned = []
    for number, line in enumerate(lines):
        parsed = parse_import_line(line)
        if parsed is not None:
            scanned.append((number, parsed))
    return scanned


def module_header_lines(lines: List[str], scanned: List[ScannedImport]) -> Set[int]:
    """0-based lines of the `module ... where` header, which may span several lines."""
    end = scanned[0][0] if scanned else len(lines)
    header: Set[int] = set()
    for number in range(end):
        if header or _MODULE_HEADER_START_RE.match(lines[number]):
            header.add(number)
            if _WHERE_RE.search(lines[number]):
                break
    return header


def hydrated_sequence(imp: ImportLine, prefix: str) -> Optional[int]:
    """N when imp is `import qualified M as <prefix>_N`, else None."""
    if not imp.qualified or imp.alias is None:
        return None
    match = hydrated_alias_regex(prefix).match(imp.alias)
    return int(match.group(1)) if match else None


def rewrite_qualified_names(line: str, qualifiers: Dict[str, str]) -> str:
    """Replace `Q.name` by `qualifiers[Q].name` for every known qualifier Q."""
    def replace(match: "re.Match[str]") -> str:
        qualifier = match.group(1)[:-1]
        target = qualifiers.get(qualifier)
        if target is None:
            return match.group(0)
        return f"{target}.{match.group(2)}"

    return _QUALIFIED_NAME_RE.sub(replace, line)


def hydrate(text: str, prefix: str) -> Optional[TextEdit]:
    """
    Hydrate a buffer.

    Returns None when the buffer has no recognized import, or when it is
    already hydrated with this prefix. Returns an InsertText edit when no body
    reference needed rewriting, a ReplaceContent edit otherwise.
    """
    lines = text.split("\n")
    scanned = scan_imports(lines)
    if not scanned:
        logger.debug("No import declarations, nothing to hydrate")
        return None
    if any(hydrated_sequence(imp, prefix) is not None for _, imp in scanned):
        logger.debug(f"Buffer already has imports aliased {prefix}{HYDRATED_ALIAS_SEPARATOR}N")
        return None

    block = [
        hydrated_import(prefix, imp.module_path, sequence)
        for sequence, (_, imp) in enumerate(scanned, start=1)
    ]

    # The first import using a qualifier owns it.
    qualifiers: Dict[str, str] = {}
    for sequence, (_, imp) in enumerate(scanned, start=1):
        qualifiers.setdefault(imp.qualifier, hydrated_alias(prefix, sequence))

    untouched = {number for number, _ in scanned} | module_header_lines(lines, scanned)
    body = [
        line if number in untouched else rewrite_qualified_names(line, qualifiers)
        for number, line in enumerate(lines)
    ]

    insert_at = scanned[0][0]
    logger.debug(f"Hydrating {len(block)} imports before line {insert_at + 1}")
    if body == lines:
        return InsertText(line=insert_at, text="\n" + "\n".join(block) + "\n\n")
    hydrated = body[:insert_at] + [""] + block + [""] + body[insert_at:]
    return ReplaceContent(text="\n".join(hydrated))


def _original_for(originals: List[ImportLine], sequence: int, module_path: str) -> Optional[ImportLine]:
    if 1 <= sequence <= len(originals) and originals[sequence - 1].module_path == module_path:
        return originals[sequence - 1]
    for imp in originals:
        if imp.module_path == module_path:
            return imp
    return None


def _framed_blank_lines(lines: List[str], deleted: Set[int]) -> Set[int]:
    """Blank lines on both sides of each fully deleted run of lines."""
    framing: Set[int] = set()
    for start in sorted(deleted):
        if start - 1 in deleted:
            continue
        end = start
        while end + 1 in deleted:
            end += 1
        before, after = start - 1, end + 1
        if before >= 0 and after < len(lines) and not lines[before].strip() and not lines[after].strip():
            framing.update((before, after))
    return framing


def dehydrate(text: str, prefix: str) -> Optional[TextEdit]:
    """
    Dehydrate a buffer.

    Returns None when no `import qualified M as <prefix>_N` line is present.
    """
    lines = text.split("\n")
    scanned = scan_imports(lines)

    hydrated: List[Tuple[int, ImportLine, int]] = []
    originals: List[ImportLine] = []
    for number, imp in scanned:
        sequence = hydrated_sequence(imp, prefix)
        if sequence is None:
            originals.append(imp)
        else:
            hydrated.append((number, imp, sequence))

    if not hydrated:
        logger.debug(f"No imports aliased {prefix}{HYDRATED_ALIAS_SEPARATOR}N, nothing to dehydrate")
        return None

    targets: Dict[str, str] = {}
    replacements: Dict[int, str] = {}
    deleted: Set[int] = set()
    minimal_emitted: Set[str] = set()
    for number, imp, sequence in hydrated:
        original = _original_for(originals, sequence, imp.module_path)
        if original is not None:
            targets[imp.alias] = original.qualifier
            deleted.add(number)
        else:
            targets[imp.alias] = imp.module_path
            if imp.module_path in minimal_emitted:
                deleted.add(number)
            else:
                minimal_emitted.add(imp.module_path)
                replacements[number] = f"import {imp.module_path}"

    deleted |= _framed_blank_lines(lines, deleted)

    reference_re = hydrated_reference_regex(prefix)

    def restore(match: "re.Match[str]") -> str:
        target = targets.get(match.group(1))
        if target is None:
            return match.group(0)
        return f"{target}.{match.group(2)}"

    untouched = {number for number, _ in scanned} | module_header_lines(lines, scanned)
    result: List[str] = []
    for number, line in enumerate(lines):
        if number in deleted:
            continue
        if number in replacements:
            result.append(replacements[number])
        elif number in untouched:
            result.append(line)
        else:
            result.append(reference_re.sub(restore, line))

    logger.debug(f"Dehydrated {len(hydrated)} imports")
    return ReplaceContent(text="\n".join(result))
