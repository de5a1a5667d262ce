"""Project workspace primitives: paths, files, artifacts and sources."""

from .artifacts import LightClassFile
from .discovery import discover_source_files, is_source_path, should_exclude
from .filesystem import FileSystem, LocalFileSystem
from .paths import (
    CLASS_FILE_SUFFIX,
    ArtifactPathError,
    class_file_path,
    normalize_project_key,
    project_key,
    resolve_output_path,
)
from .sources import (
    SourceRegistry,
    SourceRegistryError,
    TrackedFile,
    normalize_line_separators,
)

__all__ = [
    "ArtifactPathError",
    "CLASS_FILE_SUFFIX",
    "FileSystem",
    "LightClassFile",
    "LocalFileSystem",
    "SourceRegistry",
    "SourceRegistryError",
    "TrackedFile",
    "class_file_path",
    "discover_source_files",
    "is_source_path",
    "normalize_line_separators",
    "normalize_project_key",
    "project_key",
    "resolve_output_path",
    "should_exclude",
]
