"""Tests for the sub-unit type table (skelgen.scaffolder.units)."""

from __future__ import annotations

import pytest

from skelgen.scaffolder.units import (
    UNIT_TYPES,
    UnitType,
    UnknownUnitTypeError,
    get_unit_type,
)

pytestmark = pytest.mark.unit


class TestUnitTypes:
    @pytest.mark.parametrize(
        "keyword, parent, template",
        [
            ("function", "functions", "function"),
            ("package", "packages", "package"),
            ("app:react", "apps", "app-react"),
            ("app:elysia", "apps", "app-elysia"),
        ],
    )
    def test_folder_mapping(self, keyword: str, parent: str, template: str):
        unit = get_unit_type(keyword)
        assert unit.keyword == keyword
        assert unit.parent_folder == parent
        assert unit.template_folder == template

    def test_exactly_four_types(self):
        assert list(UNIT_TYPES) == ["function", "package", "app:react", "app:elysia"]

    def test_only_functions_substitute_pascal(self):
        assert [k for k, u in UNIT_TYPES.items() if u.pascal_token] == ["function"]

    def test_next_steps_reference_the_unit_folder(self):
        for unit in UNIT_TYPES.values():
            first = unit.next_steps[0].format(name="demo")
            assert first == f"cd {unit.parent_folder}/demo"

    def test_labels(self):
        assert UNIT_TYPES["app:react"].label == "React app"
        assert UNIT_TYPES["function"].label == "Function"

    def test_is_model(self):
        assert isinstance(UNIT_TYPES["package"], UnitType)


class TestUnknownUnitType:
    @pytest.mark.parametrize("keyword", ["widget", "app", "app:vue", "Function", ""])
    def test_rejected(self, keyword: str):
        with pytest.raises(UnknownUnitTypeError) as exc_info:
            get_unit_type(keyword)
        assert exc_info.value.unit_type == keyword

    def test_message_lists_valid_types(self):
        err = UnknownUnitTypeError("widget")
        assert "'widget'" in str(err)
        for keyword in UNIT_TYPES:
            assert keyword in str(err)

    def test_is_value_error(self):
        assert issubclass(UnknownUnitTypeError, ValueError)
