"""
Risk Geometry Model.

The theta analysis and the collision-probability correction are computed by an
external numeric routine shipped as a shared library. This module defines the
three-operation contract the suggestion adjustment relies on, and a binding to
the deployed library. Tests substitute their own implementation of the
protocol.

C signatures of the deployed routine (every argument a pointer to one double):

    void analyze_theta(double *t0, double *p0, double *t1, double *p1, double *theta);
    void adjust_coll_prob(double *t0, double *p0, double *t1, double *p1, double *adjusted);
    bool check_theta(double *theta);
"""
import ctypes
import logging
from typing import Any, Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)

# Returned by adjust_collision_probability when no valid adjustment exists
NO_ADJUSTMENT = -1.0

_SCALAR = np.ctypeslib.ndpointer(dtype=np.float64, ndim=1, shape=(1,), flags="C_CONTIGUOUS")


class GeometryModelError(RuntimeError):
    """The risk geometry routine could not be loaded."""


class RiskGeometryModel(Protocol):
    def analyze_theta(self, t0: float, p0: float, t1: float, p1: float) -> float:
        ...

    def check_theta(self, theta: float) -> bool:
        ...

    def adjust_collision_probability(self, t0: float, p0: float, t1: float, p1: float) -> float:
        ...


def _scalar(value: float) -> np.ndarray:
    return np.array([value], dtype=np.float64)


class NativeRiskGeometryModel:
    """
    Calls into the deployed theta routine.

    ``library`` is anything exposing ``analyze_theta``, ``adjust_coll_prob`` and
    ``check_theta`` with the C calling convention above; normally a
    ``ctypes.CDLL`` obtained through :meth:`from_path`.
    """

    def __init__(self, library: Any):
        self._lib = library

    @classmethod
    def from_path(cls, path: Optional[str]) -> "NativeRiskGeometryModel":
        if not path:
            raise GeometryModelError("GEOMETRY_LIBRARY_PATH is not configured")
        try:
            lib = ctypes.CDLL(path)
        except OSError as e:
            raise GeometryModelError(f"Cannot load risk geometry library {path}: {e}") from e

        for name in ("analyze_theta", "adjust_coll_prob"):
            func = getattr(lib, name)
            func.argtypes = [_SCALAR] * 5
            func.restype = None
        lib.check_theta.argtypes = [_SCALAR]
        lib.check_theta.restype = ctypes.c_bool

        logger.info(f"Loaded risk geometry library from {path}")
        return cls(lib)

    def analyze_theta(self, t0: float, p0: float, t1: float, p1: float) -> float:
        theta = _scalar(0.0)
        self._lib.analyze_theta(_scalar(t0), _scalar(p0), _scalar(t1), _scalar(p1), theta)
        return float(theta[0])

    def check_theta(self, theta: float) -> bool:
        return bool(self._lib.check_theta(_scalar(theta)))

    def adjust_collision_probability(self, t0: float, p0: float, t1: float, p1: float) -> float:
        adjusted = _scalar(NO_ADJUSTMENT)
        self._lib.adjust_coll_prob(_scalar(t0), _scalar(p0), _scalar(t1), _scalar(p1), adjusted)
        return float(adjusted[0])
