"""
Graphics module for contactmap.

- matrix_plot: contact and distance matrix figures (requires matplotlib)
"""

from .matrix_plot import (
    HAS_MATPLOTLIB,
    plot_contact_map,
    save_contact_map_png,
)

__all__ = [
    'HAS_MATPLOTLIB',
    'plot_contact_map',
    'save_contact_map_png',
]
