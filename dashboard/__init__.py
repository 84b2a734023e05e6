"""
Dashboard module - terminal table of session participants.

Rendering goes through a character grid so successive updates only repaint
the cells that changed.
"""

from dashboard.controller import ControllerState, DashboardController, run_dashboard
from dashboard.display import DisplayRenderer, RenderMode

__all__ = [
    "ControllerState",
    "DashboardController",
    "DisplayRenderer",
    "RenderMode",
    "run_dashboard",
]
