"""Visualization kinds relevant to sharing."""

from enum import StrEnum


class VisualizationType(StrEnum):
    """Derived maps versus canonical table visualizations."""

    DERIVED = "derived"
    TABLE = "table"
