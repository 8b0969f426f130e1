import os
import sys
import itertools
import unittest
import numpy as np

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from BasisGraph.BasisSpec import BasisSpec, DEFAULT_BASIS, evaluate
from BasisGraph.CoefficientSource import CoefficientSource
from BasisGraph.DomainSampler import X_MAX
from BasisGraph.SceneComposer import SceneComposer, RESULT_TAG, basis_depth
from BasisGraph.ViewportObserver import ViewportObserver


class TestSceneComposer(unittest.TestCase):
    def setUp(self):
        self.composer = SceneComposer(DEFAULT_BASIS, viewport=(800, 400))

    def test_result_layer_is_nearest_and_drawn_last(self):
        draw = self.composer.scene.draw_list()
        self.assertEqual(len(draw), 4)
        self.assertEqual(draw[-1].source, RESULT_TAG)
        self.assertTrue(draw[-1].is_result)
        self.assertEqual(draw[-1].z, 0.0)
        self.assertTrue(all(layer.z > 0 for layer in draw[:-1]))

    def test_farther_layers_come_first(self):
        draw = self.composer.scene.draw_list()
        for (i, a), (j, b) in itertools.combinations(enumerate(draw), 2):
            if a.z > b.z:
                self.assertLess(i, j)
            elif b.z > a.z:
                self.assertLess(j, i)

    def test_basis_depth_follows_configuration_order(self):
        by_label = {layer.source.label: layer.z for layer in self.composer.scene.basis_layers}
        self.assertEqual(sorted(by_label), ["1", "2", "3"])
        for label, z in zip(("1", "2", "3"), (1.0, 2.2, 3.4)):
            self.assertAlmostEqual(by_label[label], z)
        self.assertAlmostEqual(self.composer.scene.max_depth, 3.4)

    def test_coefficient_change_only_recomputes_result(self):
        before = self.composer.recompute_counts()
        self.composer.set_coefficients([0.2, 0.7, 0.4], elapsed=1.5)
        after = self.composer.recompute_counts()
        self.assertEqual(after["basis"], before["basis"])
        self.assertEqual(after["floor"], before["floor"])
        self.assertEqual(after["projector"], before["projector"])
        self.assertEqual(after["result"], before["result"] + 1)
        self.assertEqual(self.composer.scene.coefficients, (0.2, 0.7, 0.4))
        self.assertEqual(self.composer.scene.elapsed, 1.5)

    def test_unchanged_coefficients_reuse_result(self):
        first = self.composer.scene.result_layer
        self.composer.set_coefficients([0.5, 0.5, 0.5])
        self.assertIs(self.composer.scene.result_layer, first)

    def test_resize_recomputes_everything_and_keeps_coefficients(self):
        self.composer.set_coefficients([0.3, 0.6, 0.9])
        old = self.composer.scene
        self.composer.set_viewport(1000, 600)
        new = self.composer.scene

        self.assertEqual(new.params.size, (1000.0, 600.0))
        self.assertEqual(new.coefficients, (0.3, 0.6, 0.9))
        for a, b in zip(old.basis_layers, new.basis_layers):
            self.assertIs(a.source, b.source)
            self.assertFalse(np.array_equal(a.curve.xs, b.curve.xs))
        self.assertFalse(np.array_equal(old.result_layer.curve.ys, new.result_layer.curve.ys))
        self.assertEqual(self.composer.recompute_counts()["basis"], 2)

    def test_scene_is_consistent_with_its_projection(self):
        self.composer.set_viewport(1000, 600)
        scene = self.composer.scene
        proj = self.composer.projector
        self.assertIs(proj.params, scene.params)
        xs = self.composer.grid.values
        for layer in scene.basis_layers:
            ys = evaluate(xs, layer.source)
            sx, sy = proj.project(xs, ys, layer.z)
            np.testing.assert_allclose(layer.curve.xs, np.round(sx, 1))
            np.testing.assert_allclose(layer.curve.ys, np.round(sy, 1))

    def test_result_curve_matches_weighted_sum(self):
        coeffs = [0.25, 0.5, 0.75]
        scene = self.composer.set_coefficients(coeffs)
        xs = self.composer.grid.values
        ys = sum(c * evaluate(xs, s) for c, s in zip(coeffs, DEFAULT_BASIS))
        _, sy = self.composer.projector.project(xs, ys, 0.0)
        np.testing.assert_allclose(scene.result_layer.curve.ys, np.round(sy, 1))
        self.assertEqual(len(scene.guides), 11)

    def test_label_anchors(self):
        proj = self.composer.projector
        for layer in self.composer.scene.basis_layers:
            spec = layer.source
            lx, ly = proj.project(X_MAX, evaluate(X_MAX, spec), layer.z)
            self.assertAlmostEqual(layer.label.x, lx + 10)
            self.assertAlmostEqual(layer.label.y, ly)
            self.assertEqual(layer.label.text, f"ϕ{spec.label}")

        result = self.composer.scene.result_layer.label
        rx, ry = proj.project(X_MAX, 0.0, 0.0)
        self.assertAlmostEqual(result.x, rx + 20)
        self.assertAlmostEqual(result.y, ry)
        self.assertEqual(result.text, "R(x)")

    def test_label_shift_moves_basis_label(self):
        specs = (BasisSpec(amplitude=2.0, color="#000", label="a", offset=0.0, label_shift=-12.0),)
        composer = SceneComposer(specs)
        layer = composer.scene.basis_layers[0]
        _, ly = composer.projector.project(X_MAX, evaluate(X_MAX, specs[0]), layer.z)
        self.assertAlmostEqual(layer.label.y, ly - 12.0)

    def test_coefficient_length_mismatch_fails_fast(self):
        with self.assertRaises(ValueError):
            self.composer.set_coefficients([0.5, 0.5])
        with self.assertRaises(ValueError):
            SceneComposer(DEFAULT_BASIS, coefficients=[0.5])
        self.assertEqual(self.composer.coefficients, (0.5, 0.5, 0.5))

    def test_scene_updated_signal(self):
        received = []
        self.composer.scene_updated.connect(received.append)
        self.composer.set_coefficients([0.1, 0.2, 0.3])
        self.composer.set_viewport(900, 500)
        self.assertEqual(len(received), 2)
        self.assertIs(received[-1], self.composer.scene)

    def test_degenerate_viewport_warns_and_stays_finite(self):
        with self.assertWarns(UserWarning):
            composer = SceneComposer(DEFAULT_BASIS, viewport=(100, 100))
        scene = composer.scene
        self.assertTrue(scene.params.is_degenerate)
        for layer in scene.draw_list():
            self.assertTrue(np.all(layer.curve.finite_mask()))

    def test_nan_coefficient_propagates_without_raising(self):
        scene = self.composer.set_coefficients([float("nan"), 0.5, 0.5])
        self.assertFalse(np.any(scene.result_layer.curve.finite_mask()))
        self.assertEqual(scene.guides, ())
        self.assertEqual(scene.result_layer.curve.svg(), "")

    def test_floor_decorations(self):
        scene = self.composer.scene
        self.assertEqual(len([ln for ln in scene.grid_lines if ln.kind == "depth"]), 8)
        self.assertEqual(len([ln for ln in scene.grid_lines if ln.kind == "domain"]), 9)
        self.assertEqual(scene.depth_axis.kind, "axis")
        self.assertEqual(scene.back_wall.kind, "wall")
        self.assertEqual(len(scene.axis_labels), 3)
        self.assertAlmostEqual(basis_depth(2), 3.4)

    def test_attach_follows_source_and_viewport(self):
        source = CoefficientSource(3)
        observer = ViewportObserver((1000, 600))
        self.composer.attach(coefficient_source=source, viewport_observer=observer)
        self.assertEqual(self.composer.viewport, (1000.0, 600.0))

        source.set([0.4, 0.4, 0.4], 2.0)
        self.assertEqual(self.composer.scene.coefficients, (0.4, 0.4, 0.4))
        self.assertEqual(self.composer.scene.elapsed, 2.0)

        observer.observe(640, 480)
        self.assertEqual(self.composer.scene.params.size, (640.0, 480.0))
        self.assertEqual(self.composer.scene.coefficients, (0.4, 0.4, 0.4))


class TestViewportObserver(unittest.TestCase):
    def test_emits_only_on_change(self):
        observer = ViewportObserver()
        self.assertFalse(observer.is_valid())
        sizes = []
        observer.resized.connect(lambda w, h: sizes.append((w, h)))
        self.assertTrue(observer.observe(800, 400))
        self.assertFalse(observer.observe(800, 400))
        self.assertTrue(observer.observe(1000, 600))
        self.assertEqual(sizes, [(800.0, 400.0), (1000.0, 600.0)])
        self.assertTrue(observer.is_valid())


if __name__ == "__main__":
    unittest.main(verbosity=2)
