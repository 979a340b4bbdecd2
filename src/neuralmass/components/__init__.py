"""
Model components.

This module contains the cortical column neural-mass model.
"""

from neuralmass.components.column import ColumnAccess, CorticalColumn

__all__ = [
    "ColumnAccess",
    "CorticalColumn",
]
