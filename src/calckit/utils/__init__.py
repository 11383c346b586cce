"""Utility functions for CalcKit."""

from .numerics import snap_to_integer

__all__ = ["snap_to_integer"]
