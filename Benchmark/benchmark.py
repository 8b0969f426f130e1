# Benchmark/benchmark.py
#
# Frame-cost benchmarks for BasisGraph.
#
# Usage examples:
#   python Benchmark/benchmark.py --scenario compose --steps 300 1200
#   python Benchmark/benchmark.py --scenario all --reps 2 --verbose

import os
import sys
import csv
import json
import time
import argparse
from typing import List, Tuple

import numpy as np
from PyQt5 import QtCore, QtWidgets

THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from BasisGraph.AnimationDriver import DEFAULT_OSCILLATORS, ManualTickScheduler, oscillate
from BasisGraph.BasisSpec import DEFAULT_BASIS
from BasisGraph.DomainSampler import X_MAX, X_MIN, sample_domain
from BasisGraph.SceneComposer import SceneComposer
from BasisGraph.widgets.SynthesisWindow import SynthesisWindow


class FpsMeter(QtCore.QObject):
    """Approximate FPS meter using QGraphicsScene.changed signal counts."""
    def __init__(self, scene: QtWidgets.QGraphicsScene):
        super().__init__()
        self._count = 0
        self._enabled = False
        self._start = 0.0
        self._stop = 0.0
        scene.changed.connect(self._on_changed)

    def _on_changed(self, *_):
        if self._enabled:
            self._count += 1

    def start(self):
        self._count = 0
        self._start = time.perf_counter()
        self._stop = 0.0
        self._enabled = True

    def stop(self):
        self._enabled = False
        self._stop = time.perf_counter()

    def stats(self) -> Tuple[float, int, float]:
        if self._stop <= self._start:
            return (0.0, 0, 0.0)
        duration = self._stop - self._start
        fps = self._count / duration if duration > 0 else 0.0
        return (fps, self._count, duration)


def run_compose(app, steps: List[int], reps: int, frames: int, duration_s: float, verbose: bool):
    """Headless: cost of one coefficient update through SceneComposer."""
    results = []
    for n in steps:
        grid = sample_domain(X_MIN, X_MAX, n)
        for rep in range(1, reps + 1):
            if verbose:
                print(f"\n[scenario] compose | steps={n} | rep={rep}")
            composer = SceneComposer(DEFAULT_BASIS, grid=grid, viewport=(1200, 600))
            times = np.empty(frames)
            for i in range(frames):
                coeffs = oscillate(i * 0.016, DEFAULT_OSCILLATORS)
                start = time.perf_counter()
                composer.set_coefficients(coeffs, elapsed=i * 0.016)
                times[i] = time.perf_counter() - start

            counts = composer.recompute_counts()
            results.append({
                "scenario": "compose_frame",
                "steps": n,
                "repetition": rep,
                "frames": frames,
                "mean_ms": float(times.mean() * 1e3),
                "p95_ms": float(np.percentile(times, 95) * 1e3),
                "max_ms": float(times.max() * 1e3),
                "basis_recomputes": counts["basis"],
                "result_recomputes": counts["result"],
            })
            if verbose:
                print(f"[compose] mean={times.mean() * 1e3:.3f}ms p95={np.percentile(times, 95) * 1e3:.3f}ms")
    return results


def run_window(app, steps: List[int], reps: int, frames: int, duration_s: float, verbose: bool):
    """Full window: drive the animation for duration_s and count repaints."""
    results = []
    for rep in range(1, reps + 1):
        if verbose:
            print(f"\n[scenario] window | rep={rep}")
        scheduler = ManualTickScheduler()
        window = SynthesisWindow(scheduler=scheduler)
        window.show()
        app.processEvents()

        meter = FpsMeter(window.canvas.plot_widget.scene())
        ticks = 0
        meter.start()
        start = time.perf_counter()
        while time.perf_counter() - start < duration_s:
            scheduler.tick()
            ticks += 1
            app.processEvents(QtCore.QEventLoop.AllEvents, 16)
        meter.stop()

        fps, changed, duration = meter.stats()
        results.append({
            "scenario": "window_streaming",
            "steps": len(window.composer.grid),
            "repetition": rep,
            "frames": ticks,
            "fps_canvas": fps,
            "scene_changes": changed,
            "duration_s": duration,
        })
        if verbose:
            print(f"[window] ticks={ticks} fps={fps:.1f}")
        window.close()
        app.processEvents()
    return results


SCENARIO_MAP = {
    "compose": run_compose,
    "window": run_window,
    "all": None,
}


def write_outputs(rows: List[dict], csv_path: str, json_path: str, verbose: bool):
    if not rows:
        return

    fieldnames = sorted({k for row in rows for k in row.keys()})

    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        w.writeheader()
        for row in rows:
            w.writerow({fn: row.get(fn, None) for fn in fieldnames})
    if verbose:
        print(f"[output] CSV written: {csv_path}")

    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2)
    if verbose:
        print(f"[output] JSON written: {json_path}")


def parse_args(argv):
    p = argparse.ArgumentParser(description="Frame benchmark for BasisGraph")
    p.add_argument("--steps", type=int, nargs="*", default=[300, 1200, 4800],
                   help="Domain sample counts for the compose scenario.")
    p.add_argument("--reps", type=int, default=3,
                   help="Repetitions per configuration.")
    p.add_argument("--frames", type=int, default=600,
                   help="Coefficient updates per compose run.")
    p.add_argument("--duration", type=float, default=5.0,
                   help="Seconds per window run.")
    p.add_argument("--csv", type=str, default="bench_results.csv",
                   help="CSV output path.")
    p.add_argument("--json", type=str, default="bench_results.json",
                   help="JSON output path.")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--scenario", type=str,
                   choices=list(SCENARIO_MAP.keys()),
                   default="all",
                   help="Which scenario to run.")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv or sys.argv[1:])
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)

    names = [n for n, fn in SCENARIO_MAP.items() if fn is not None] if args.scenario == "all" else [args.scenario]
    all_rows = []
    for name in names:
        all_rows += SCENARIO_MAP[name](app,
                                       steps=args.steps,
                                       reps=args.reps,
                                       frames=args.frames,
                                       duration_s=args.duration,
                                       verbose=args.verbose)

    write_outputs(all_rows, args.csv, args.json, args.verbose)
    app.processEvents()
    return 0


if __name__ == "__main__":
    sys.exit(main())
