"""
Tests for the debug panel helpers.
"""

import unittest

import numpy as np

from sign_analysis.visualization import dim, tile_panels, title_panel


def solid_panel(value: int, size=(40, 60)) -> np.ndarray:
    return np.full(size + (3,), value, dtype=np.uint8)


class TilePanelsTests(unittest.TestCase):
    def test_panels_fill_rows_left_to_right(self) -> None:
        panels = [("a", solid_panel(10)), ("b", solid_panel(20)), ("c", solid_panel(30))]

        sheet = tile_panels(panels)

        self.assertEqual(sheet.shape, (80, 120, 3))
        self.assertEqual(sheet[39, 0, 0], 10)
        self.assertEqual(sheet[39, 60, 0], 20)
        self.assertEqual(sheet[79, 0, 0], 30)
        self.assertTrue(np.all(sheet[40:, 60:] == 0))

    def test_mismatched_panel_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            tile_panels([("a", solid_panel(10)), ("b", solid_panel(10, (20, 20)))])

    def test_nothing_to_tile(self) -> None:
        with self.assertRaises(ValueError):
            tile_panels([])


class PanelHelperTests(unittest.TestCase):
    def test_title_darkens_only_the_top_strip(self) -> None:
        panel = solid_panel(200)

        titled = title_panel(panel, "x")

        self.assertEqual(titled.shape, panel.shape)
        self.assertLess(titled[0, -1, 0], 200)
        self.assertEqual(titled[-1, -1, 0], 200)
        self.assertTrue(np.all(panel == 200))

    def test_dim_scales_and_saturates(self) -> None:
        self.assertEqual(dim(solid_panel(200), 0.3)[0, 0, 0], 60)
        self.assertEqual(dim(solid_panel(200), 2.0)[0, 0, 0], 255)


if __name__ == "__main__":
    unittest.main()
