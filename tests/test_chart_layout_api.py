from __future__ import annotations

import unittest

from chart_layout import UnsupportedVariantError, chart_geometry


class ChartGeometryTests(unittest.TestCase):
    def test_simple_records_become_bar_rects(self) -> None:
        geometry = chart_geometry([{"x": "A", "y": 10}, {"x": "B", "y": -10}], width=200, height=200)
        self.assertEqual(geometry.chart.variant, "simple")
        self.assertEqual(geometry.orientation, "vertical")
        self.assertEqual(geometry.value_scale.domain, (-10.0, 10.0))
        rects = {bar.category: bar.rect for bar in geometry.bars}
        self.assertAlmostEqual(rects["A"].x, 5.0)
        self.assertAlmostEqual(rects["A"].height, 100.0)
        self.assertAlmostEqual(rects["B"].y, 100.0)
        self.assertTrue(all(bar.series_id is None for bar in geometry.bars))

    def test_custom_keys_and_forced_orientation(self) -> None:
        geometry = chart_geometry(
            [{"name": "A", "total": "4"}],
            x_key="name",
            y_key="total",
            orientation="horizontal",
            width=100,
            height=50,
        )
        self.assertEqual(geometry.orientation, "horizontal")
        (bar,) = geometry.bars
        self.assertEqual(bar.category, "A")
        self.assertAlmostEqual(bar.rect.width, 100.0)

    def test_series_records_are_grouped(self) -> None:
        records = [
            {"x": "A", "y": 1, "series": "s1"},
            {"x": "A", "y": 2, "series": "s2"},
            {"x": "B", "y": 3, "series": "s1"},
        ]
        geometry = chart_geometry(records, width=400, height=300, orientation="vertical")
        self.assertEqual(geometry.chart.variant, "grouped")
        self.assertEqual(geometry.band_scale.domain, ("A", "B"))
        self.assertEqual(sorted((b.series_id, b.category) for b in geometry.bars), [("s1", "A"), ("s1", "B"), ("s2", "A")])
        a1 = next(b.rect for b in geometry.bars if b.series_id == "s1" and b.category == "A")
        a2 = next(b.rect for b in geometry.bars if b.series_id == "s2" and b.category == "A")
        self.assertLess(a1.x, a2.x)

    def test_stacked_variant_uses_configured_order(self) -> None:
        records = [
            {"x": "A", "y": 3, "series": "s1"},
            {"x": "B", "y": 5, "series": "s1"},
            {"x": "A", "y": 2, "series": "s2"},
            {"x": "B", "y": 1, "series": "s2"},
        ]
        geometry = chart_geometry(
            records,
            variant="stacked",
            orientation="vertical",
            width=200,
            height=100,
            custom_config={"stack_order": "ascending"},
        )
        self.assertEqual(geometry.chart.config.stack_order, "ascending")  # type: ignore[union-attr]
        self.assertEqual(geometry.value_scale.domain, (0.0, 6.0))
        self.assertEqual(len(geometry.bars), 4)
        # s2 has the smaller sum and sits at the bottom.
        b_s2 = next(b.rect for b in geometry.bars if b.series_id == "s2" and b.category == "B")
        b_s1 = next(b.rect for b in geometry.bars if b.series_id == "s1" and b.category == "B")
        self.assertAlmostEqual(b_s2.y + b_s2.height, 100.0)
        self.assertAlmostEqual(b_s1.y, 0.0)

    def test_category_tagged_records_keep_every_value(self) -> None:
        records = [
            {"x": f"q{i % 6}", "y": 1, "category": "north" if i < 6 else "south"}
            for i in range(12)
        ]
        with self.assertNoLogs("chart_layout.stacking", level="WARNING"):
            geometry = chart_geometry(records, orientation="vertical", width=400, height=300)
        self.assertEqual(geometry.chart.variant, "stacked")
        self.assertEqual({b.series_id for b in geometry.bars}, {"north", "south"})
        self.assertEqual(len(geometry.bars), 12)
        self.assertEqual(geometry.value_scale.domain, (0.0, 2.0))

    def test_custom_series_key_drives_recommendation_and_grouping(self) -> None:
        records = [
            {"x": "A", "y": 1, "team": "red"},
            {"x": "A", "y": 2, "team": "blue"},
            {"x": "B", "y": 3, "team": "red"},
        ]
        geometry = chart_geometry(records, series_key="team", orientation="vertical")
        self.assertEqual(geometry.chart.variant, "grouped")
        self.assertEqual(sorted({b.series_id for b in geometry.bars}), ["blue", "red"])

    def test_unknown_variant_raises(self) -> None:
        with self.assertRaises(UnsupportedVariantError):
            chart_geometry([{"x": "A", "y": 1}], variant="pie")


if __name__ == "__main__":
    unittest.main()
