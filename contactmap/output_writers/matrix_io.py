"""
Contact matrix persistence.

Matrices are stored as compressed NumPy archives (.npz) holding the matrix
itself and the radius it was computed with. NaN cells (missing distances)
survive the round trip.
"""

from pathlib import Path
import zipfile
from typing import Tuple, Union
import numpy as np

from ..errors import ValidationError

FORMAT_VERSION = 1


def save_matrix(path: Union[str, Path], matrix: np.ndarray, radius: float) -> None:
    """
    Save a contact or distance matrix.

    Args:
        path: Output file (written as-is, .npz suggested)
        matrix: Boolean contact matrix or float distance matrix
        radius: Radius used to compute the matrix (-1 for raw distances)
    """
    with open(path, 'wb') as f:
        np.savez_compressed(
            f,
            matrix=np.asarray(matrix),
            radius=np.float64(radius),
            format_version=np.int64(FORMAT_VERSION),
        )


def load_matrix(path: Union[str, Path]) -> Tuple[np.ndarray, float]:
    """
    Load a matrix saved with save_matrix().

    Returns:
        Tuple of (matrix, radius)

    Raises:
        ValidationError: If the file is not a contact map archive
    """
    try:
        data = np.load(path, allow_pickle=False)
    except (ValueError, EOFError, zipfile.BadZipFile) as e:
        raise ValidationError(f"{path} is not a contact map file: {e}") from e

    # A plain .npy file loads as an ndarray
    if not isinstance(data, np.lib.npyio.NpzFile):
        raise ValidationError(f"{path} is not a contact map file")

    with data:
        if 'matrix' not in data.files or 'radius' not in data.files:
            raise ValidationError(f"{path} is not a contact map file")
        version = int(data['format_version']) if 'format_version' in data.files else FORMAT_VERSION
        if version != FORMAT_VERSION:
            raise ValidationError(f"Unsupported contact map format version {version} in {path}")
        return data['matrix'].copy(), float(data['radius'])
