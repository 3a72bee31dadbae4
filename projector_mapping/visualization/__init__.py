"""Visualization helpers for calibration cells."""

from projector_mapping.visualization.cell_map_visualizer import visualize_cell_map

__all__ = [
    "visualize_cell_map",
]
