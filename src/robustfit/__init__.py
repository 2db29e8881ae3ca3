"""
robustfit: RANSAC fitting of 2D lines and 3D planes to outlier-heavy point sets.
"""
import logging

from .ransac import (
    LineModel, PlaneModel, LineFitter, PlaneFitter,
    RansacConfig, RansacResult, RansacEngine,
    RansacError, InsufficientDataError, NoConsensusError,
    ransac, fit_line, fit_plane,
)
from .utils import setup_logger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "LineModel", "PlaneModel", "LineFitter", "PlaneFitter",
    "RansacConfig", "RansacResult", "RansacEngine",
    "RansacError", "InsufficientDataError", "NoConsensusError",
    "ransac", "fit_line", "fit_plane",
    "setup_logger",
]
