"""Binding context and binary name mapping."""

from .context import (
    BindingContext,
    ClassDescriptor,
    MappingBindingContext,
    declared_binding_context,
    internal_name,
)

__all__ = [
    "BindingContext",
    "ClassDescriptor",
    "MappingBindingContext",
    "declared_binding_context",
    "internal_name",
]
