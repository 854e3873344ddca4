from __future__ import annotations

import unittest

import numpy as np

from chart_layout import BandScale, ChartConfigError, LinearScale, ScaleLookupError
from chart_layout.scales import (
    build_value_scale,
    format_ticks_for_axis,
    generate_nice_ticks,
    nice_domain,
    value_domain,
)


class BandScaleTests(unittest.TestCase):
    def test_bands_fill_range_with_half_gap_at_edges(self) -> None:
        scale = BandScale(domain=("a", "b", "c", "a"), range_start=0.0, range_stop=300.0, padding_inner=0.1)
        self.assertEqual(scale.domain, ("a", "b", "c"))
        self.assertAlmostEqual(scale.step, 100.0)
        self.assertAlmostEqual(scale.bandwidth, 90.0)
        self.assertAlmostEqual(scale("a"), 5.0)
        self.assertAlmostEqual(scale("b"), 105.0)
        self.assertAlmostEqual(scale("c"), 205.0)
        inner_gap = scale("b") - (scale("a") + scale.bandwidth)
        self.assertAlmostEqual(scale("a"), inner_gap / 2.0)
        self.assertAlmostEqual(300.0 - (scale("c") + scale.bandwidth), inner_gap / 2.0)

    def test_reversed_range_puts_first_key_at_far_end(self) -> None:
        scale = BandScale(domain=("a", "b", "c"), range_start=300.0, range_stop=0.0, padding_inner=0.1)
        self.assertAlmostEqual(scale("a"), 205.0)
        self.assertAlmostEqual(scale("c"), 5.0)

    def test_explicit_outer_padding_uses_general_formula(self) -> None:
        scale = BandScale(domain=("a", "b", "c"), range_start=0.0, range_stop=300.0, padding_inner=0.1, padding_outer=0.1)
        self.assertAlmostEqual(scale.step, 300.0 / 3.1)
        self.assertAlmostEqual(scale.bandwidth, scale.step * 0.9)
        self.assertAlmostEqual(scale("a"), scale.step * 0.1)
        self.assertAlmostEqual(scale("c") + scale.bandwidth + scale.step * 0.1, 300.0)

    def test_keys_are_cast_to_strings(self) -> None:
        scale = BandScale.from_padding([1, 2, "2"], (0.0, 100.0), 0.0)
        self.assertEqual(scale.domain, ("1", "2"))
        self.assertAlmostEqual(scale(2), 50.0)
        self.assertIn(1, scale)
        self.assertEqual(scale.offsets(), {"1": 0.0, "2": 50.0})

    def test_unknown_key_raises_named_lookup_error(self) -> None:
        scale = BandScale.from_padding(["a"], (0.0, 100.0), 0.1)
        with self.assertRaisesRegex(ScaleLookupError, "'zzz'"):
            scale("zzz")
        self.assertIsNone(scale.get("zzz"))
        self.assertEqual(scale.get("zzz", -1.0), -1.0)

    def test_padding_must_stay_below_one(self) -> None:
        with self.assertRaises(ChartConfigError):
            BandScale.from_padding(["a"], (0.0, 100.0), 1.0)
        with self.assertRaises(ChartConfigError):
            BandScale.from_padding(["a"], (0.0, 100.0), -0.1)


class LinearScaleTests(unittest.TestCase):
    def test_value_domain_includes_zero(self) -> None:
        self.assertEqual(value_domain([-5.0, 10.0]), (-5.0, 10.0))
        self.assertEqual(value_domain([3.0, 7.0]), (0.0, 7.0))
        self.assertEqual(value_domain([]), (0.0, 0.0))

    def test_nice_rounds_domain_outward(self) -> None:
        self.assertEqual(LinearScale(domain=(-5.0, 10.0), pixel_range=(300.0, 0.0)).nice().domain, (-6.0, 10.0))
        self.assertEqual(nice_domain(0.0, 0.97), (0.0, 1.0))
        self.assertEqual(nice_domain(0.0, 10.0), (0.0, 10.0))
        self.assertEqual(nice_domain(3.0, 3.0), (3.0, 3.0))

    def test_nice_keeps_reversed_domain_direction(self) -> None:
        self.assertEqual(nice_domain(10.0, -5.0), (10.0, -6.0))

    def test_mapping_and_inversion(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), pixel_range=(300.0, 0.0))
        self.assertEqual(scale(0.0), 300.0)
        self.assertEqual(scale(10.0), 0.0)
        self.assertEqual(scale(5.0), 150.0)
        self.assertEqual(scale.invert(150.0), 5.0)
        mapped = scale.map_values(np.asarray([0.0, 5.0, 10.0]))
        self.assertTrue(np.allclose(mapped, [300.0, 150.0, 0.0]))

    def test_zero_width_domain_maps_to_range_midpoint(self) -> None:
        scale = LinearScale(domain=(0.0, 0.0), pixel_range=(300.0, 0.0))
        self.assertEqual(scale(5.0), 150.0)
        self.assertTrue(np.allclose(scale.map_values(np.asarray([1.0, 2.0])), [150.0, 150.0]))

    def test_build_value_scale_is_niced(self) -> None:
        scale = build_value_scale([-5.0, 10.0], (300.0, 0.0))
        self.assertEqual(scale.domain, (-6.0, 10.0))
        raw = build_value_scale([-5.0, 10.0], (300.0, 0.0), nice=False)
        self.assertEqual(raw.domain, (-5.0, 10.0))

    def test_ticks_stay_inside_domain(self) -> None:
        scale = LinearScale(domain=(0.0, 10.0), pixel_range=(0.0, 100.0))
        self.assertTrue(np.allclose(scale.ticks(5), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]))
        self.assertEqual(scale.tick_labels(5), ["0", "2", "4", "6", "8", "10"])

    def test_niced_domain_starts_and_ends_on_ticks(self) -> None:
        scale = LinearScale(domain=(-5.0, 10.0), pixel_range=(300.0, 0.0)).nice()
        ticks = scale.ticks()
        self.assertEqual((ticks[0], ticks[-1]), scale.domain)
        self.assertTrue(np.allclose(np.diff(ticks), 2.0))
        fraction = LinearScale(domain=(0.0, 0.97), pixel_range=(0.0, 100.0)).nice()
        ticks = fraction.ticks()
        self.assertEqual(len(ticks), 11)
        self.assertEqual((ticks[0], ticks[-1]), (0.0, 1.0))
        self.assertEqual(fraction.tick_labels()[:3], ["0", "0.1", "0.2"])


class TickFormattingTests(unittest.TestCase):
    def test_tick_formatting_uses_consistent_decimals_from_step(self) -> None:
        ticks = np.asarray([1.5, 2.0, 2.5, 3.0], dtype=np.float64)
        self.assertEqual(format_ticks_for_axis(ticks), ["1.5", "2", "2.5", "3"])

    def test_tick_formatting_preserves_integer_trailing_zeros(self) -> None:
        ticks = np.asarray([20.0, 30.0, 40.0], dtype=np.float64)
        self.assertEqual(format_ticks_for_axis(ticks), ["20", "30", "40"])

    def test_tick_formatting_snaps_near_zero(self) -> None:
        ticks = np.asarray([-1.0, -4.4409e-16, 1.0], dtype=np.float64)
        self.assertEqual(format_ticks_for_axis(ticks)[1], "0")

    def test_generate_nice_ticks_single_value(self) -> None:
        self.assertTrue(np.array_equal(generate_nice_ticks(2.0, 2.0, 5), np.asarray([2.0])))
        with self.assertRaises(ValueError):
            generate_nice_ticks(0.0, 1.0, 0)


if __name__ == "__main__":
    unittest.main()
