"""CLI entry point: run `hsmodules <command>` or `python -m hsmodules <command>`."""

import logging
import sys
from pathlib import Path
from typing import List, Optional


def _build_parser():
    import argparse

    parser = argparse.ArgumentParser(prog="hsmodules", description="Navigate and restructure a Haskell module namespace.")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Project directory (default: current directory)")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: <root>/.hsmodules.yml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("tree", help="Print the module hierarchy")

    search = commands.add_parser("search", help="List modules backed by a file")
    search.add_argument("query", nargs="?", default="")

    create = commands.add_parser("create", help="Create the file for a module")
    create.add_argument("name")
    create.add_argument("--sourcedir", type=Path, default=None)

    add = commands.add_parser("add", help="Add a submodule to a module")
    add.add_argument("parent")
    add.add_argument("shortname")
    add.add_argument("--sourcedir", type=Path, default=None)

    rename = commands.add_parser("rename", help="Duplicate a module under a new name")
    rename.add_argument("old")
    rename.add_argument("new")
    rename.add_argument("--sourcedir", type=Path, default=None)

    jump = commands.add_parser("jump", help="Print the file of the module at a position")
    jump.add_argument("file", type=Path)
    jump.add_argument("line", type=int)
    jump.add_argument("column", type=int)

    focus = commands.add_parser("focus", help="Print the module a file defines")
    focus.add_argument("file", type=Path)

    for name, help_text in (("hydrate", "Add prefixed qualified imports"),
                            ("dehydrate", "Collapse prefixed qualified imports")):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("file", type=Path)
        sub.add_argument("--dry-run", action="store_true", help="Print the result instead of writing it")

    check = commands.add_parser("check", help="Report import lines hydrate would skip")
    check.add_argument("file", type=Path)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from .shared.errors import ConfigError, ErrorReporter
    from .shared.module import Module, parse_module_name
    from .frontend.parser import check_imports
    from .utils.config import load_config
    from .utils.io_utils import try_read_source_file
    from .workspace import Buffer, Workspace

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        config = load_config(args.root, args.config)
    except ConfigError as e:
        sys.stderr.write(f"hsmodules: error: {e}\n")
        return 1

    workspace = Workspace(args.root, config)
    workspace.populate()

    if args.command == "tree":
        for line in workspace.render_tree():
            print(line)
        return 0

    if args.command == "search":
        items = workspace.search_modules(args.query)
        for item in items:
            print(f"{item.label}\t{item.description}")
        return 0 if items else 1

    if args.command == "create":
        name = parse_module_name(args.name)
        if name is None:
            sys.stderr.write(f"hsmodules: error: not a module name: {args.name}\n")
            return 1
        return 0 if workspace.create_module_file(Module.create(name), sourcedir=args.sourcedir) else 1

    if args.command == "add":
        parent_name = parse_module_name(args.parent)
        if parent_name is None:
            sys.stderr.write(f"hsmodules: error: not a module name: {args.parent}\n")
            return 1
        parent = workspace.index.get(args.parent) or Module.create(parent_name)
        return 0 if workspace.add_submodule(parent, args.shortname, args.sourcedir) else 1

    if args.command == "rename":
        module = workspace.index.get(args.old)
        if module is None or not module.is_physical:
            sys.stderr.write(f"hsmodules: error: no source file for module {args.old}\n")
            return 1
        return 0 if workspace.rename_module(module, args.new, args.sourcedir) else 1

    if args.command in ("jump", "focus", "check"):
        path = workspace.resolve_path(args.file)
        text = try_read_source_file(path)
        if text is None:
            sys.stderr.write(f"hsmodules: error: could not read file: {path}\n")
            return 1
        buffer = Buffer(path=path, text=text)

        if args.command == "jump":
            target = workspace.jump_to_module(buffer, args.line, args.column)
            if target is None:
                return 1
            print(target)
            return 0

        if args.command == "focus":
            module = workspace.focus_module(buffer)
            if module is None:
                return 1
            print(module.id)
            return 0

        reporter = ErrorReporter({str(args.file): text})
        for diagnostic in check_imports(text, str(args.file)):
            reporter.report(diagnostic)
        reporter.print_errors()
        return 1 if reporter.has_errors() else 0

    rewrite = workspace.hydrate_file if args.command == "hydrate" else workspace.dehydrate_file
    result = rewrite(args.file, dry_run=args.dry_run)
    if result is None:
        return 1
    if args.dry_run:
        sys.stdout.write(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
