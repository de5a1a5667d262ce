"""Resolution of declared class names to binary descriptors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

from lightclass_sync.adapters.base import ParsedUnit


@dataclass(slots=True, frozen=True)
class ClassDescriptor:
    """Binary-level identity of a resolved class declaration."""

    fq_name: str
    package_name: str | None = None

    def __post_init__(self) -> None:
        if not self.fq_name.strip():
            raise ValueError("ClassDescriptor fq_name must be non-empty.")
        if self.package_name and not self.fq_name.startswith(f"{self.package_name}."):
            raise ValueError(
                f"ClassDescriptor fq_name '{self.fq_name}' is not inside package "
                f"'{self.package_name}'."
            )

    @property
    def class_path(self) -> tuple[str, ...]:
        """Class names from outermost to innermost, without the package."""
        if not self.package_name:
            return tuple(self.fq_name.split("."))
        return tuple(self.fq_name[len(self.package_name) + 1 :].split("."))


class BindingContext(Protocol):
    """Resolves fully-qualified declaration names after analysis."""

    def resolve(self, fq_name: str) -> ClassDescriptor | None:
        """Return the descriptor for a name, or None when it did not resolve."""


def internal_name(descriptor: ClassDescriptor) -> str:
    """Map a descriptor to its JVM internal name, e.g. ``a/b/Outer$Inner``."""
    class_part = "$".join(descriptor.class_path)
    if not descriptor.package_name:
        return class_part
    return f"{descriptor.package_name.replace('.', '/')}/{class_part}"


class MappingBindingContext:
    """Binding context backed by a fixed name -> descriptor table."""

    def __init__(self, descriptors: Mapping[str, ClassDescriptor] | None = None) -> None:
        self._descriptors = MappingProxyType(dict(descriptors or {}))

    def resolve(self, fq_name: str) -> ClassDescriptor | None:
        return self._descriptors.get(fq_name)

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._descriptors))

    @classmethod
    def of(cls, *descriptors: ClassDescriptor) -> MappingBindingContext:
        return cls({descriptor.fq_name: descriptor for descriptor in descriptors})


def declared_binding_context(
    units: Iterable[ParsedUnit],
    exclude: Iterable[str] = (),
) -> MappingBindingContext:
    """Resolve every named declaration of the given units as declared.

    Stands in for a compiler binding context when no analysis is available:
    each declaration with a fully-qualified name resolves to a descriptor in
    its unit's package. Names in ``exclude`` are left unresolved.
    """
    skipped = set(exclude)
    descriptors: dict[str, ClassDescriptor] = {}
    for unit in units:
        for declaration in unit.declarations:
            fq_name = declaration.fq_name
            if fq_name is None or fq_name in skipped:
                continue
            descriptors.setdefault(
                fq_name,
                ClassDescriptor(fq_name=fq_name, package_name=unit.package_name),
            )
    return MappingBindingContext(descriptors)
