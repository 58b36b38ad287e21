"""
prose_feedback package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .analysis import analyze, readability_band
from .config import ProseFeedbackConfig, config_from_dict, config_from_yaml, load_config
from .models import AnalysisResult, Issue
from .position_map import build_position_map
from .reconciler import Reconciler, reconcile
from .session import AnalysisSession
from .tree import MemoryEditor
from .visibility import VisibilityState, compute_visible

__all__ = [
    "AnalysisResult",
    "AnalysisSession",
    "Issue",
    "MemoryEditor",
    "ProseFeedbackConfig",
    "Reconciler",
    "VisibilityState",
    "analyze",
    "build_position_map",
    "compute_visible",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "readability_band",
    "reconcile",
]

__version__ = "0.1.0"
