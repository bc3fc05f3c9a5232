"""Arbitrary-precision expression calculator."""

from .MathEngine import Executor, calculate
from .error import MathError

__all__ = ["Executor", "calculate", "MathError"]
