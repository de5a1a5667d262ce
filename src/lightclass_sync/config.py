"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "lightclass.toml"
DEFAULT_OUTPUT_DIR = "bin/kotlin"
DEFAULT_DATA_DIR_NAME = ".lightclass"
DEFAULT_SOURCE_ROOTS = ("src",)
DEFAULT_INCLUDE_EXTENSIONS = (".kt",)
DEFAULT_EXCLUDE_GLOBS = ("**/.git/**", "**/build/**")


@dataclass(slots=True, frozen=True)
class OutputConfig:
    """Binary output directory settings."""

    dir: str
    prune_empty_dirs: bool


@dataclass(slots=True, frozen=True)
class SourcesConfig:
    """Source folder discovery settings."""

    roots: tuple[str, ...]
    include_extensions: tuple[str, ...]
    exclude_globs: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class AuditConfig:
    """Update cycle audit log toggle."""

    enabled: bool


@dataclass(slots=True, frozen=True)
class TrackerConfig:
    """Fully merged tracker configuration."""

    project_root: Path
    data_dir: Path
    output: OutputConfig
    sources: SourcesConfig
    audit: AuditConfig

    @property
    def output_root(self) -> Path:
        """Absolute location of the binary output directory."""
        return self.project_root / self.output.dir

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot for reports."""
        return {
            "project_root": str(self.project_root),
            "data_dir": str(self.data_dir),
            "output": {
                "dir": self.output.dir,
                "prune_empty_dirs": self.output.prune_empty_dirs,
            },
            "sources": {
                "roots": list(self.sources.roots),
                "include_extensions": list(self.sources.include_extensions),
                "exclude_globs": list(self.sources.exclude_globs),
            },
            "audit": {
                "enabled": self.audit.enabled,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    output_dir: str | None = None
    prune_empty_dirs: bool | None = None
    audit_enabled: bool | None = None


def default_config(project_root: Path) -> TrackerConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return TrackerConfig(
        project_root=resolved_root,
        data_dir=resolved_root / DEFAULT_DATA_DIR_NAME,
        output=OutputConfig(dir=DEFAULT_OUTPUT_DIR, prune_empty_dirs=True),
        sources=SourcesConfig(
            roots=DEFAULT_SOURCE_ROOTS,
            include_extensions=DEFAULT_INCLUDE_EXTENSIONS,
            exclude_globs=DEFAULT_EXCLUDE_GLOBS,
        ),
        audit=AuditConfig(enabled=True),
    )


def load_project_config_file(project_root: Path) -> dict[str, object]:
    """Load optional lightclass.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _relative_dir(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    normalized = value.replace("\\", "/").strip()
    if normalized.startswith("/") or Path(value).is_absolute():
        raise ValueError(f"Config field '{name}' must be project-relative.")
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if not parts:
        raise ValueError(f"Config field '{name}' must not be empty.")
    if any(part == ".." for part in parts):
        raise ValueError(f"Config field '{name}' must stay inside the project root.")
    return "/".join(parts)


def _extensions(value: tuple[str, ...], name: str) -> tuple[str, ...]:
    output: list[str] = []
    for item in value:
        if not item.startswith(".") or len(item) < 2:
            raise ValueError(f"Config field '{name}' entries must look like '.kt'.")
        output.append(item.lower())
    return tuple(output)


def merge_config(
    base: TrackerConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> TrackerConfig:
    """Merge defaults, project config, then CLI/startup overrides."""
    output_payload = _get_table(file_payload, "output")
    sources_payload = _get_table(file_payload, "sources")
    audit_payload = _get_table(file_payload, "audit")

    output_dir = base.output.dir
    if "dir" in output_payload:
        output_dir = _relative_dir(output_payload["dir"], "output.dir")
    prune_empty_dirs = _optional_bool(
        output_payload.get("prune_empty_dirs"),
        "output.prune_empty_dirs",
        base.output.prune_empty_dirs,
    )

    roots = base.sources.roots
    if "roots" in sources_payload:
        raw_roots = _tuple_of_strings(sources_payload["roots"], "sources", "roots")
        roots = tuple(_relative_dir(root, "sources.roots") for root in raw_roots)
    include_extensions = base.sources.include_extensions
    if "include_extensions" in sources_payload:
        include_extensions = _extensions(
            _tuple_of_strings(
                sources_payload["include_extensions"], "sources", "include_extensions"
            ),
            "sources.include_extensions",
        )
    exclude_globs = base.sources.exclude_globs
    if "exclude_globs" in sources_payload:
        exclude_globs = _tuple_of_strings(
            sources_payload["exclude_globs"], "sources", "exclude_globs"
        )

    audit_enabled = _optional_bool(
        audit_payload.get("enabled"), "audit.enabled", base.audit.enabled
    )

    merged = TrackerConfig(
        project_root=base.project_root,
        data_dir=base.data_dir,
        output=OutputConfig(dir=output_dir, prune_empty_dirs=prune_empty_dirs),
        sources=SourcesConfig(
            roots=roots,
            include_extensions=include_extensions,
            exclude_globs=exclude_globs,
        ),
        audit=AuditConfig(enabled=audit_enabled),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: TrackerConfig, overrides: CliOverrides) -> TrackerConfig:
    """Apply startup overrides at highest precedence."""
    output_dir = config.output.dir
    if overrides.output_dir is not None:
        output_dir = _relative_dir(overrides.output_dir, "overrides.output_dir")
    output = OutputConfig(
        dir=output_dir,
        prune_empty_dirs=_optional_bool(
            overrides.prune_empty_dirs,
            "overrides.prune_empty_dirs",
            config.output.prune_empty_dirs,
        ),
    )
    audit = AuditConfig(
        enabled=_optional_bool(
            overrides.audit_enabled, "overrides.audit_enabled", config.audit.enabled
        )
    )
    data_dir = overrides.data_dir or config.data_dir
    return TrackerConfig(
        project_root=config.project_root,
        data_dir=data_dir.resolve(),
        output=output,
        sources=config.sources,
        audit=audit,
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> TrackerConfig:
    """Load effective config using merge order defaults -> project file -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_project_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())
