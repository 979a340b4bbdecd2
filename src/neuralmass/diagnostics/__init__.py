"""Recording of column state for offline analysis."""

from neuralmass.diagnostics.recorder import DEFAULT_RECORDED_VARIABLES, ColumnRecorder

__all__ = [
    "ColumnRecorder",
    "DEFAULT_RECORDED_VARIABLES",
]
