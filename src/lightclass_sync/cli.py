"""Command line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from lightclass_sync.adapters import ParsedUnit
from lightclass_sync.binding import declared_binding_context, internal_name
from lightclass_sync.config import CliOverrides
from lightclass_sync.tracking import (
    CompilationResult,
    LightClassManager,
    UntrackedSourceError,
    UpdateAbortedError,
    create_manager,
)
from lightclass_sync.workspace import ArtifactPathError, class_file_path, project_key

SYNC_DESCRIPTION = (
    "Rebuild light classes from a compilation manifest. Each run starts from an "
    "empty table, so only artifacts whose current sources include an --affected "
    "file are touched; an artifact that lost an affected source is not."
)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the lightclass-sync command."""
    parser = argparse.ArgumentParser(prog="lightclass-sync")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument("--output-dir", required=False, default=None)
    parser.add_argument(
        "--prune-empty-dirs", choices=("true", "false"), required=False, default=None
    )
    parser.add_argument("--audit", choices=("true", "false"), required=False, default=None)
    commands = parser.add_subparsers(dest="command", required=True)

    sync = commands.add_parser(
        "sync",
        help="Rebuild light classes from a compilation manifest.",
        description=SYNC_DESCRIPTION,
    )
    sync.add_argument("--manifest", required=True)
    sync.add_argument("--affected", action="append", default=[])

    outline = commands.add_parser(
        "outline", help="Show the light classes project source files would produce."
    )
    outline.add_argument("paths", nargs="+")
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed arguments into config overrides."""
    return CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        output_dir=args.output_dir,
        prune_empty_dirs=_optional_flag(args.prune_empty_dirs),
        audit_enabled=_optional_flag(args.audit),
    )


def run_sync(manager: LightClassManager, manifest: Path, affected: list[str]) -> dict[str, object]:
    """Run a full rebuild from a manifest file and return its report."""
    result = CompilationResult.load(manifest, manager.config.project_root)
    report = manager.on_full_rebuild(result, affected)
    return report.to_dict()


def run_outline(manager: LightClassManager, paths: list[str]) -> dict[str, object]:
    """Describe the declarations and predicted artifacts of source files."""
    sources = manager.sources
    project_root = manager.config.project_root
    parsed: list[ParsedUnit] = []
    unknown: list[str] = []
    for raw in paths:
        tracked = sources.resolve_tracked_file(raw)
        unit = sources.parse(tracked) if tracked is not None else None
        if unit is None:
            unknown.append(raw)
            continue
        parsed.append(unit)

    binding = declared_binding_context(parsed)
    files: list[dict[str, object]] = []
    for unit in parsed:
        artifacts: list[str] = []
        for declaration in unit.top_level_declarations():
            if declaration.fq_name is None:
                continue
            descriptor = binding.resolve(declaration.fq_name)
            if descriptor is None:
                continue
            location = class_file_path(manager.config.output_root, internal_name(descriptor))
            artifacts.append(project_key(project_root, location))
        files.append(
            {
                "path": unit.path,
                "package": unit.package_name,
                "declarations": [
                    {
                        "kind": declaration.kind,
                        "name": declaration.name,
                        "fq_name": declaration.fq_name,
                        "scope": declaration.scope,
                        "start_line": declaration.start_line,
                        "end_line": declaration.end_line,
                    }
                    for declaration in unit.declarations
                ],
                "artifacts": artifacts,
            }
        )
    return {"files": files, "unknown": unknown}


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the lightclass-sync command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    stream = out_stream or sys.stdout
    try:
        manager = create_manager(args.project_root, cli_overrides=overrides_from_args(args))
        if args.command == "sync":
            result = run_sync(manager, Path(args.manifest), list(args.affected))
        else:
            result = run_outline(manager, list(args.paths))
    except ArtifactPathError as error:
        return _emit(stream, _error_envelope("ARTIFACT_PATH_BLOCKED", error.reason), 1)
    except UntrackedSourceError as error:
        return _emit(stream, _error_envelope("UNTRACKED_SOURCE", str(error)), 1)
    except UpdateAbortedError as error:
        return _emit(stream, _error_envelope("UPDATE_ABORTED", str(error)), 1)
    except (OSError, ValueError) as error:
        return _emit(stream, _error_envelope("INVALID_INPUT", str(error)), 2)
    return _emit(stream, {"ok": True, "result": result, "error": None}, 0)


def _error_envelope(code: str, message: str) -> dict[str, object]:
    return {"ok": False, "result": {}, "error": {"code": code, "message": message}}


def _emit(stream: TextIO, payload: dict[str, object], exit_code: int) -> int:
    stream.write(f"{json.dumps(payload, sort_keys=True)}\n")
    stream.flush()
    return exit_code


def _optional_flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "true"


if __name__ == "__main__":
    raise SystemExit(main())
