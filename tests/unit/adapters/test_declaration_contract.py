from __future__ import annotations

import pytest

from lightclass_sync.adapters import (
    LOCAL,
    TOP_LEVEL,
    AdapterContractError,
    Declaration,
    normalize_and_sort_declarations,
)


def _declaration(**overrides: object) -> Declaration:
    values: dict[str, object] = {
        "kind": "class",
        "name": "A",
        "fq_name": "p.A",
        "scope": TOP_LEVEL,
        "start_line": 1,
        "end_line": 1,
    }
    values.update(overrides)
    return Declaration(**values)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"kind": " "}, "kind must be non-empty"),
        ({"name": ""}, "name must be non-empty"),
        ({"scope": "nested"}, "scope must be one of"),
        ({"start_line": 0}, "start_line must be >= 1"),
        ({"start_line": 3, "end_line": 2}, "end_line must be >= start_line"),
        ({"parent": "p.Outer"}, "cannot have a parent"),
    ],
)
def test_invalid_declarations_are_rejected(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(AdapterContractError, match=message):
        normalize_and_sort_declarations([_declaration(**overrides)])


def test_declarations_sort_by_position_then_name() -> None:
    ordered = normalize_and_sort_declarations(
        [
            _declaration(name="B", start_line=4, end_line=4),
            _declaration(name="Z", start_line=1, end_line=9),
            _declaration(name="A", start_line=1, end_line=9),
        ]
    )

    assert [item.name for item in ordered] == ["A", "Z", "B"]


def test_blank_optional_text_becomes_none() -> None:
    (declaration,) = normalize_and_sort_declarations(
        [_declaration(fq_name="  ", scope=LOCAL, parent=" ")]
    )

    assert declaration.fq_name is None
    assert declaration.parent is None
