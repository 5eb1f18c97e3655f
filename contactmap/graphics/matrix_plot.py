"""
Contact map plotting.

Draws boolean contact matrices and raw residue-residue distance matrices
with configurable colors. Missing (NaN) cells are drawn in the configured
missing color.
"""

from typing import Optional, Tuple
import numpy as np

try:
    import matplotlib.pyplot as plt
    from matplotlib.figure import Figure
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def _trim_missing(matrix: np.ndarray, missing: np.ndarray) -> Tuple[np.ndarray, int, int]:
    """
    Drop leading rows/columns that are entirely missing.

    Sequence numbers usually start at 1 or later, so the first rows of the
    matrix are empty. Returns (trimmed, first_row, first_col).
    """
    rows = np.where(~missing.all(axis=1))[0]
    cols = np.where(~missing.all(axis=0))[0]
    if len(rows) == 0 or len(cols) == 0:
        return matrix, 0, 0
    return matrix[rows[0]:, cols[0]:], int(rows[0]), int(cols[0])


def plot_contact_map(
    matrix: np.ndarray,
    ax: Optional["plt.Axes"] = None,
    cmap: Optional[str] = None,
    vmax: Optional[float] = None,
    title: str = "Contact map",
    label1: str = "Molecule 1",
    label2: str = "Molecule 2",
    show_colorbar: bool = True,
) -> Tuple["Figure", "plt.Axes"]:
    """
    Plot a contact or distance matrix.

    Args:
        matrix: Boolean contact matrix or float distance matrix (NaN = missing),
                indexed by sequence numbers
        ax: Matplotlib axes to plot on (creates new if None)
        cmap: Colormap name (uses config default if None)
        vmax: Maximum distance for the colormap (distance matrices only)
        title: Plot title
        label1: Y-axis label (rows, first molecule)
        label2: X-axis label (columns, second molecule)
        show_colorbar: Whether to show colorbar (distance matrices only)

    Returns:
        Tuple of (figure, axes)
    """
    _check_matplotlib()
    from ..config import get_config

    config = get_config()
    is_contact = matrix.dtype == bool

    if is_contact:
        # Leading rows/columns without contacts are trimmed too
        values, row0, col0 = _trim_missing(matrix.astype(float), ~matrix)
        missing = np.zeros(values.shape, dtype=bool)
    else:
        values = np.asarray(matrix, dtype=float)
        values, row0, col0 = _trim_missing(values, np.isnan(values))
        missing = np.isnan(values)

    if cmap is None:
        cmap = config.contact_cmap if is_contact else config.distance_cmap
    if vmax is None:
        vmax = 1.0 if is_contact else config.distance_vmax

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    colormap = plt.get_cmap(cmap).copy()
    colormap.set_bad(config.missing_color)

    masked = np.ma.masked_where(missing, values) if missing.any() else values
    extent = (col0 - 0.5, col0 + values.shape[1] - 0.5,
              row0 + values.shape[0] - 0.5, row0 - 0.5)
    im = ax.imshow(masked, cmap=colormap, vmin=0, vmax=vmax, origin='upper',
                   extent=extent, interpolation='nearest', aspect='auto')

    ax.set_title(title, fontsize=12)
    ax.set_xlabel(f"{label2} residue")
    ax.set_ylabel(f"{label1} residue")

    if show_colorbar and not is_contact:
        cbar = fig.colorbar(im, ax=ax, shrink=0.8)
        cbar.set_label("Minimum atom-atom distance (Å)")

    return fig, ax


def save_contact_map_png(
    matrix: np.ndarray,
    output_file: str,
    title: str = "Contact map",
    label1: str = "Molecule 1",
    label2: str = "Molecule 2",
) -> None:
    """Plot a contact or distance matrix and save it to an image file."""
    _check_matplotlib()
    from ..config import get_config

    fig, _ = plot_contact_map(matrix, title=title, label1=label1, label2=label2)
    fig.savefig(output_file, dpi=get_config().dpi, bbox_inches='tight')
    plt.close(fig)
