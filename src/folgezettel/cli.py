"""CLI for folgezettel - link aliasing and folgezettel indentation."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.fs_listing import FsListing
from .adapters.memory_editor import InMemoryEditor
from .aliaser import LinkAliaser
from .config import SETTING_KEYS, ConfigError, merge_settings
from .core.grammar import IdGrammar, PatternError, resolve_grammar
from .core.level import compute_level, leading_id
from .core.model import Cursor
from .format.formatter import alias_file, write_atomic
from .indent import refresh_listing
from .runtime import build_runtime


def _version_string() -> str:
    return (
        f"folgezettel {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform()})"
    )


def _iter_notes(paths: list[Path]) -> list[Path]:
    files: list[Path] = []
    for p in paths:
        if p.is_dir():
            files.extend(sorted(
                q for q in p.rglob("*.md")
                if not any(part.startswith(".") for part in q.relative_to(p).parts)
            ))
        else:
            files.append(p)
    return files


def cmd_alias(args: argparse.Namespace, rt: Any) -> int:
    """Alias links in note files."""
    settings = rt.settings()
    targets = _iter_notes([Path(p) for p in args.paths] or [rt.vault_path])
    dry_run = not args.write

    # All targets are read before any is written.
    results = []
    for path in targets:
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1
        try:
            result = alias_file(path, settings, dry_run=True)
        except UnicodeDecodeError as e:
            print(f"Error: {path} is not valid UTF-8 ({e.reason})", file=sys.stderr)
            return 1
        if result.changed:
            results.append((path, result))

    if not dry_run:
        for path, result in results:
            write_atomic(path, result.formatted_text)

    if args.json:
        output = [
            {"path": str(path), "links": result.count, "written": not dry_run}
            for path, result in results
        ]
        print(json.dumps(output, indent=2))
    elif not args.quiet:
        for path, result in results:
            verb = "aliased" if not dry_run else "would alias"
            print(f"{path}: {verb} {result.count} link(s)")
        if not results:
            print("No links to alias")

    if args.check and results:
        return 1
    return 0


def cmd_line(args: argparse.Namespace, rt: Any) -> int:
    """Run the typing handler on a single line of text."""
    line = args.text
    ch = len(line) if args.cursor is None else args.cursor
    if not 0 <= ch <= len(line):
        print(f"Error: Cursor {ch} is outside the line (0..{len(line)})", file=sys.stderr)
        return 1

    editor = InMemoryEditor(line, Cursor(0, ch))
    aliaser = LinkAliaser(editor, rt.settings)
    changed = aliaser.handle_paste(line) if args.paste else aliaser.handle_change()

    if args.json:
        print(json.dumps({"changed": changed, "text": editor.text}))
    else:
        print(editor.text)
    return 0


def cmd_level(args: argparse.Namespace, rt: Any) -> int:
    """Print the folgezettel level of names."""
    rows = [(name, leading_id(name), compute_level(name)) for name in args.names]

    if args.json:
        print(json.dumps([{"name": n, "id": i, "level": lvl} for n, i, lvl in rows], indent=2))
    else:
        for name, _ident, level in rows:
            print(f"{level}\t{name}")
    return 0


def cmd_tree(args: argparse.Namespace, rt: Any) -> int:
    """Print the vault listing indented by folgezettel level."""
    if not rt.vault_path.exists():
        print(f"Error: Vault not found: {rt.vault_path}", file=sys.stderr)
        return 1

    listing = FsListing(rt.vault_path, show_all=True) if args.all else rt.listing
    settings = rt.settings()
    refresh_listing(listing, settings)

    if args.json:
        output = [
            {"path": e.path, "folder": e.is_folder, "class": listing.classes.get(e.path)}
            for e in listing.list_entries()
        ]
        print(json.dumps(output, indent=2))
    else:
        for line in listing.render():
            print(line)
    return 0


def cmd_config_show(args: argparse.Namespace, rt: Any) -> int:
    """Show effective settings."""
    settings = rt.settings()
    data = settings.to_dict()

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            if isinstance(value, list):
                value = ", ".join(value) if value else "(none)"
            print(f"{key}: {value}")
        print(f"settings file: {rt.store.path}")

    # Surface a broken custom pattern here rather than only at edit time.
    if settings.id_format == "custom":
        resolve_grammar(settings)
    return 0


def cmd_config_set(args: argparse.Namespace, rt: Any) -> int:
    """Persist a setting."""
    if args.key not in SETTING_KEYS:
        print(
            f"Error: Unknown setting '{args.key}' (expected one of {', '.join(SETTING_KEYS)})",
            file=sys.stderr,
        )
        return 1

    value: Any = args.value
    if args.key in ("include_folders", "exclude_folders"):
        # "a,b" or one folder per line, as in the settings form
        value = "\n".join(args.value.replace(",", "\n").splitlines())

    current = rt.settings()
    updated = merge_settings(current, {args.key: value})

    if updated.id_format == "custom":
        try:
            IdGrammar.compile("custom", updated.custom_regex)
        except PatternError as e:
            print(f"Warning: {e}; the folgezettel grammar will be used", file=sys.stderr)

    rt.store.save(updated)
    if not args.quiet:
        print(f"{args.key} saved to {rt.store.path}")
    return 0


def cmd_watch(args: argparse.Namespace, rt: Any) -> int:
    """Watch the vault and alias links in saved notes."""
    from .watch import watch_vault

    return watch_vault(
        rt.vault_path,
        rt,
        debounce_ms=args.debounce,
        quiet=args.quiet,
        json_output=args.json,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fz", description="Folgezettel link aliasing and indentation"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/zettel.toml, vault/zettel.toml)",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to vault directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging to stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # alias command
    parser_alias = subparsers.add_parser("alias", help="Alias links in notes")
    parser_alias.add_argument(
        "paths", nargs="*", help="Note files or folders (default: the vault)"
    )
    parser_alias.add_argument(
        "--write", action="store_true", help="Write changes (default: dry run)"
    )
    parser_alias.add_argument(
        "--check", action="store_true", help="Exit 1 if any link would be aliased"
    )

    # line command
    parser_line = subparsers.add_parser(
        "line", help="Alias the link before the cursor in one line of text"
    )
    parser_line.add_argument("text", help="Line text")
    parser_line.add_argument(
        "--cursor", type=int, default=None, help="Cursor offset (default: end of line)"
    )
    parser_line.add_argument(
        "--paste", action="store_true", help="Treat the line as just pasted"
    )

    # level command
    parser_level = subparsers.add_parser("level", help="Print folgezettel levels")
    parser_level.add_argument("names", nargs="+", help="File names or titles")

    # tree command
    parser_tree = subparsers.add_parser("tree", help="Print the vault listing with indentation")
    parser_tree.add_argument(
        "--all", action="store_true", help="Include hidden entries and non-note files"
    )

    # config command
    parser_config = subparsers.add_parser("config", help="Show or change settings")
    config_sub = parser_config.add_subparsers(dest="config_cmd", required=True)
    config_sub.add_parser("show", help="Show effective settings")
    parser_config_set = config_sub.add_parser("set", help="Persist a setting")
    parser_config_set.add_argument("key", help="Setting name")
    parser_config_set.add_argument("value", help="Setting value")

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Alias links as notes are saved")
    parser_watch.add_argument(
        "--debounce", type=int, default=150, help="Debounce window in ms (default: 150)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        rt = build_runtime(vault_path=args.vault, config_path=args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    handlers = {
        "alias": cmd_alias,
        "line": cmd_line,
        "level": cmd_level,
        "tree": cmd_tree,
        "watch": cmd_watch,
    }

    if args.cmd == "config":
        config_handlers = {
            "show": cmd_config_show,
            "set": cmd_config_set,
        }
        handler = config_handlers.get(args.config_cmd)
    else:
        handler = handlers.get(args.cmd)

    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        return 1

    try:
        return handler(args, rt)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
