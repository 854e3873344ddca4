from __future__ import annotations

import unittest

from chart_layout import (
    ChartConfigError,
    DataPoint,
    Series,
    UnsupportedVariantError,
    create_chart_variant,
    get_recommended_variant,
    get_variant_component,
    validate_variant_data,
)
from chart_layout.config import DEFAULT_SERIES_COLORS, GroupedChartConfig, StackedChartConfig, ThemeColors


class CreateChartVariantTests(unittest.TestCase):
    def test_defaults_per_variant(self) -> None:
        grouped = create_chart_variant("grouped", [])
        self.assertIsInstance(grouped.config, GroupedChartConfig)
        self.assertEqual(grouped.config.color_scheme, DEFAULT_SERIES_COLORS)
        stacked = create_chart_variant("stacked", [])
        self.assertEqual(stacked.config, StackedChartConfig())
        self.assertEqual(create_chart_variant("simple", []).config.value_position, "end")  # type: ignore[union-attr]

    def test_overrides_merge_into_nested_sections(self) -> None:
        data = [DataPoint(x="a", y=1.0)]
        chart = create_chart_variant(
            "grouped",
            data,
            {"series_padding": 0.1, "theme": {"colors": {"primary": "#000000"}}, "animation": {"enabled": False}},
        )
        self.assertEqual(chart.variant, "grouped")
        self.assertIs(chart.data, data)
        config = chart.config
        self.assertEqual(config.series_padding, 0.1)  # type: ignore[union-attr]
        self.assertEqual(config.theme.colors.primary, "#000000")
        self.assertEqual(config.theme.colors.grid, ThemeColors().grid)
        self.assertFalse(config.animation.enabled)
        self.assertTrue(config.accessibility.keyboard_navigation)

    def test_unsupported_variant_is_named(self) -> None:
        with self.assertRaisesRegex(UnsupportedVariantError, "Unsupported chart variant: pie"):
            create_chart_variant("pie", [])
        self.assertTrue(issubclass(UnsupportedVariantError, ChartConfigError))

    def test_bad_overrides_raise(self) -> None:
        with self.assertRaisesRegex(ChartConfigError, "Unknown config option: stack_orde"):
            create_chart_variant("stacked", [], {"stack_orde": "ascending"})
        with self.assertRaisesRegex(ChartConfigError, "stack_offset"):
            create_chart_variant("stacked", [], {"stack_offset": "sideways"})

    def test_component_names(self) -> None:
        self.assertEqual(get_variant_component("bar", "stacked"), "StackedBarChart")
        self.assertEqual(get_variant_component("column", "grouped"), "GroupedColumnChart")
        with self.assertRaises(UnsupportedVariantError):
            get_variant_component("pie", "simple")


class ValidateVariantDataTests(unittest.TestCase):
    def test_container_problems(self) -> None:
        self.assertEqual(validate_variant_data("simple", "abc").errors, ("Data must be an array",))
        self.assertEqual(validate_variant_data("grouped", []).errors, ("Data array cannot be empty",))

    def test_simple_items_are_index_qualified(self) -> None:
        report = validate_variant_data("simple", [{"x": 1, "y": "a"}, {"y": 2}, 5, {"x": "ok", "y": 1}])
        self.assertFalse(report.is_valid)
        self.assertEqual(
            report.errors,
            (
                "Item 0: 'y' must be a number",
                "Item 1: missing 'x' property",
                "Data item at index 2 must be an object",
            ),
        )

    def test_series_form_is_series_qualified(self) -> None:
        data = [
            {"id": "a", "label": "A", "data": [{"x": 1, "y": 2}, {"y": "b"}]},
            {"id": "", "label": "B", "data": "nope"},
        ]
        self.assertEqual(
            validate_variant_data("stacked", data).errors,
            (
                "Series 0, item 1: missing 'x' property",
                "Series 0, item 1: 'y' must be a number",
                "Series 1: missing 'id' property",
                "Series 1: 'data' must be an array",
            ),
        )

    def test_series_dataclasses_are_accepted(self) -> None:
        data = [Series(id="a", label="A", data=(DataPoint(x="q1", y=1.0),))]
        self.assertTrue(validate_variant_data("grouped", data).is_valid)

    def test_flat_points_are_accepted_for_multi_series_variants(self) -> None:
        data = [{"x": "a", "y": 1, "metadata": {"series": "s1"}}]
        self.assertTrue(validate_variant_data("grouped", data).is_valid)

    def test_unknown_variant_is_reported_not_raised(self) -> None:
        self.assertEqual(validate_variant_data("pie", [{"x": 1, "y": 1}]).errors, ("Unsupported chart variant: pie",))


class RecommendedVariantTests(unittest.TestCase):
    def test_no_series_metadata_is_simple(self) -> None:
        self.assertEqual(get_recommended_variant([DataPoint(x="a", y=1.0), DataPoint(x="b", y=2.0)]), "simple")
        self.assertEqual(get_recommended_variant([]), "simple")

    def test_single_series_is_simple(self) -> None:
        data = [DataPoint(x=i, y=1.0, metadata={"series": "s"}) for i in range(4)]
        self.assertEqual(get_recommended_variant(data), "simple")

    def test_few_points_per_series_is_grouped(self) -> None:
        data = [DataPoint(x=i, y=1.0, metadata={"series": f"s{i % 2}"}) for i in range(4)]
        self.assertEqual(get_recommended_variant(data), "grouped")

    def test_many_points_per_series_is_stacked(self) -> None:
        data = [DataPoint(x=i, y=1.0, metadata={"category": f"c{i % 2}"}) for i in range(12)]
        self.assertEqual(get_recommended_variant(data), "stacked")

    def test_custom_series_key_is_read_before_category(self) -> None:
        data = [DataPoint(x=i, y=1.0, metadata={"team": f"t{i % 2}", "category": "all"}) for i in range(4)]
        self.assertEqual(get_recommended_variant(data, series_key="team"), "grouped")
        self.assertEqual(get_recommended_variant(data), "simple")


if __name__ == "__main__":
    unittest.main()
