import os
import sys
import math
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from PyQt5.QtTest import QTest
from PyQt5.QtWidgets import QApplication

from BasisGraph.AnimationDriver import (
    AnimationDriver,
    ManualTickScheduler,
    QtTickScheduler,
    DEFAULT_TICK_MS,
    PLAYING,
    PAUSED,
    DEFAULT_OSCILLATORS,
)
from BasisGraph.CoefficientSource import CoefficientSource


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def expected(t):
    return [0.5 + 0.3 * math.sin(f * t + p) for f, p in DEFAULT_OSCILLATORS]


class TestAnimationDriver(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.scheduler = ManualTickScheduler()
        self.driver = AnimationDriver(3, scheduler=self.scheduler, clock=self.clock)

    def tearDown(self):
        self.driver.close()

    def assertCoefficients(self, actual, wanted):
        self.assertEqual(len(actual), len(wanted))
        for a, w in zip(actual, wanted):
            self.assertAlmostEqual(a, w, places=12)

    def test_starts_playing_with_neutral_coefficients(self):
        self.assertEqual(self.driver.state, PLAYING)
        self.assertTrue(self.scheduler.is_active())
        self.assertEqual(self.driver.coefficients, (0.5, 0.5, 0.5))
        self.assertEqual(self.driver.elapsed, 0.0)

    def test_coefficients_follow_oscillators(self):
        for t in (0.0, 0.5, 1.3, 5.0, 12.7, 60.0):
            self.clock.now = 100.0 + t
            self.scheduler.tick()
            self.assertAlmostEqual(self.driver.elapsed, t)
            self.assertCoefficients(self.driver.coefficients, expected(t))
            self.assertTrue(all(0.2 <= c <= 0.8 for c in self.driver.coefficients))

    def test_tick_publishes_through_source(self):
        received = []
        self.driver.source.coefficients_updated.connect(lambda c, t: received.append((c, t)))
        self.clock.advance(2.0)
        self.scheduler.tick()
        self.assertEqual(len(received), 1)
        coeffs, t = received[0]
        self.assertAlmostEqual(t, 2.0)
        self.assertCoefficients(coeffs, expected(2.0))
        self.assertEqual(self.driver.source.get(), coeffs)

    def test_pause_stops_ticking_and_keeps_state(self):
        self.clock.advance(3.0)
        self.scheduler.tick()
        frozen = self.driver.coefficients

        self.driver.pause()
        self.assertEqual(self.driver.state, PAUSED)
        self.assertFalse(self.scheduler.is_active())

        self.clock.advance(4.0)
        self.scheduler.tick()
        self.driver.tick()
        self.assertEqual(self.driver.coefficients, frozen)
        self.assertAlmostEqual(self.driver.elapsed, 3.0)

    def test_resume_with_zero_pause_keeps_coefficients(self):
        self.clock.advance(5.0)
        self.scheduler.tick()
        before = self.driver.coefficients

        self.driver.pause()
        self.driver.play()
        self.scheduler.tick()
        self.assertCoefficients(self.driver.coefficients, before)

    def test_resume_continues_from_paused_time(self):
        self.clock.advance(5.0)
        self.scheduler.tick()
        self.driver.pause()

        self.clock.advance(30.0)
        self.driver.play()
        self.clock.advance(1.0)
        self.scheduler.tick()
        self.assertAlmostEqual(self.driver.elapsed, 6.0)
        self.assertCoefficients(self.driver.coefficients, expected(6.0))

    def test_state_changed_signal(self):
        states = []
        self.driver.state_changed.connect(states.append)
        self.driver.toggle()
        self.driver.toggle()
        self.driver.play()
        self.assertEqual(states, [PAUSED, PLAYING])

    def test_reset_is_idempotent(self):
        self.clock.advance(7.0)
        self.scheduler.tick()
        for _ in range(2):
            self.driver.reset()
            self.assertEqual(self.driver.coefficients, (0.5, 0.5, 0.5))
            self.assertEqual(self.driver.elapsed, 0.0)
            self.assertEqual(self.driver.source.get(), (0.5, 0.5, 0.5))
            self.assertEqual(self.driver.source.elapsed(), 0.0)

    def test_reset_rebases_epoch(self):
        self.clock.advance(7.0)
        self.scheduler.tick()
        self.driver.reset()
        self.clock.advance(1.5)
        self.scheduler.tick()
        self.assertAlmostEqual(self.driver.elapsed, 1.5)

    def test_reset_keeps_paused_state(self):
        self.driver.pause()
        self.driver.reset()
        self.assertEqual(self.driver.state, PAUSED)
        self.assertFalse(self.scheduler.is_active())
        self.driver.play()
        self.scheduler.tick()
        self.assertAlmostEqual(self.driver.elapsed, 0.0)

    def test_close_cancels_pending_ticks(self):
        self.driver.close()
        self.assertFalse(self.scheduler.is_active())
        before = self.driver.coefficients
        self.clock.advance(2.0)
        self.scheduler.start()
        self.scheduler.tick()
        self.driver.tick()
        self.driver.play()
        self.driver.reset()
        self.assertEqual(self.driver.coefficients, before)

    def test_oscillator_count_must_match_basis_count(self):
        with self.assertRaises(ValueError):
            AnimationDriver(2, scheduler=ManualTickScheduler(), clock=self.clock)
        with self.assertRaises(ValueError):
            AnimationDriver(3, scheduler=ManualTickScheduler(), clock=self.clock, source=CoefficientSource(4))

    def test_custom_oscillators(self):
        scheduler = ManualTickScheduler()
        driver = AnimationDriver(
            oscillators=[(1.0, 0.0), (2.0, 1.0), (0.1, 0.0), (0.0, 0.0)],
            scheduler=scheduler,
            clock=self.clock,
        )
        self.assertEqual(driver.source.size(), 4)
        self.clock.advance(1.0)
        scheduler.tick()
        self.assertAlmostEqual(driver.coefficients[0], 0.5 + 0.3 * math.sin(1.0))
        self.assertAlmostEqual(driver.coefficients[3], 0.5)
        driver.close()


class TestQtTickScheduler(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # Only one QApplication per process
        cls._app = QApplication.instance() or QApplication([])

    def test_default_interval(self):
        scheduler = QtTickScheduler()
        self.assertEqual(scheduler.interval(), DEFAULT_TICK_MS)
        self.assertFalse(scheduler.is_active())

    def test_fires_until_cancelled(self):
        scheduler = QtTickScheduler(interval_ms=5)
        fired = []
        scheduler.set_callback(lambda: fired.append(1))
        scheduler.start()
        self.assertTrue(scheduler.is_active())
        QTest.qWait(80)
        self.assertGreater(len(fired), 0)

        scheduler.cancel()
        self.assertFalse(scheduler.is_active())
        count = len(fired)
        QTest.qWait(50)
        self.assertEqual(len(fired), count)

    def test_stop_and_restart(self):
        scheduler = QtTickScheduler(interval_ms=5)
        fired = []
        scheduler.set_callback(lambda: fired.append(1))
        scheduler.start()
        scheduler.stop()
        QTest.qWait(40)
        self.assertEqual(fired, [])
        scheduler.start()
        QTest.qWait(80)
        self.assertGreater(len(fired), 0)
        scheduler.cancel()

    def test_driver_runs_on_qt_timer_until_closed(self):
        scheduler = QtTickScheduler(interval_ms=5)
        driver = AnimationDriver(3, scheduler=scheduler)
        updates = []
        driver.source.coefficients_updated.connect(lambda c, t: updates.append(t))
        self.assertTrue(scheduler.is_active())
        QTest.qWait(80)
        self.assertGreater(len(updates), 0)
        self.assertGreater(driver.elapsed, 0.0)

        driver.close()
        self.assertFalse(scheduler.is_active())
        count = len(updates)
        QTest.qWait(50)
        self.assertEqual(len(updates), count)


class TestCoefficientSource(unittest.TestCase):
    def test_defaults_to_neutral(self):
        source = CoefficientSource(3)
        self.assertEqual(source.get(), (0.5, 0.5, 0.5))
        self.assertEqual(source.elapsed(), 0.0)

    def test_set_emits_and_stores(self):
        source = CoefficientSource(2)
        received = []
        source.coefficients_updated.connect(lambda c, t: received.append((c, t)))
        source.set([0.1, 0.9], 3.0)
        self.assertEqual(received, [((0.1, 0.9), 3.0)])
        source.set([0.2, 0.8])
        self.assertEqual(source.elapsed(), 3.0)

    def test_wrong_length_raises(self):
        source = CoefficientSource(3)
        with self.assertRaises(ValueError):
            source.set([0.5, 0.5])
        self.assertEqual(source.get(), (0.5, 0.5, 0.5))

    def test_values_are_not_clamped(self):
        source = CoefficientSource(2)
        source.set([-1.5, 2.5])
        self.assertEqual(source.get(), (-1.5, 2.5))


if __name__ == "__main__":
    unittest.main(verbosity=2)
