from PyQt5 import QtWidgets

from .DomainSampler import DomainGrid, sample_domain
from .BasisSpec import BasisSpec, BasisEvaluator, DEFAULT_BASIS, evaluate, evaluate_result
from .CoefficientSource import CoefficientSource
from .Projector import ProjectionParams, Projector
from .PathBuilder import (
    PathDescription,
    GridLine,
    GuideSegment,
    build_curve_path,
    build_shadow_path,
    build_grid_lines,
    build_guide_segments,
)
from .SceneComposer import Layer, Label, Scene, SceneComposer
from .AnimationDriver import AnimationDriver, TickScheduler, QtTickScheduler, ManualTickScheduler
from .ViewportObserver import ViewportObserver
from .canvas.Canvas import Canvas
from .widgets.ControlPanel import ControlPanel
from .widgets.SynthesisWindow import SynthesisWindow

__all__ = [
    "QtWidgets",
    "DomainGrid",
    "sample_domain",
    "BasisSpec",
    "BasisEvaluator",
    "DEFAULT_BASIS",
    "evaluate",
    "evaluate_result",
    "CoefficientSource",
    "ProjectionParams",
    "Projector",
    "PathDescription",
    "GridLine",
    "GuideSegment",
    "build_curve_path",
    "build_shadow_path",
    "build_grid_lines",
    "build_guide_segments",
    "Layer",
    "Label",
    "Scene",
    "SceneComposer",
    "AnimationDriver",
    "TickScheduler",
    "QtTickScheduler",
    "ManualTickScheduler",
    "ViewportObserver",
    "Canvas",
    "ControlPanel",
    "SynthesisWindow",
]
