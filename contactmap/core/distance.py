"""
Residue-residue minimum distance computation.

Given two coordinate tensors (see coordinates.py), computes for every
residue pair the smallest atom-atom Euclidean distance:

    D[i, j] = min_k min_l || A[:, i, k] - B[:, j, l] ||

The all-versus-all atom field has n_res1 * n_res2 * n_atoms^2 cells, so the
first molecule's residue axis is processed in blocks. Missing (NaN)
coordinates never win a minimum; a residue pair with no resolvable atom
pair gets NaN.
"""

from typing import Optional
import numpy as np

from ..config import get_config
from ..errors import StructuralError, ValidationError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _check_tensor(tensor: np.ndarray, label: str) -> None:
    if tensor.ndim != 3 or tensor.shape[0] != 3:
        raise StructuralError(
            f"Coordinate tensor {label} must have shape (3, n_res, n_atoms), got {tensor.shape}"
        )


def _min_squared_distances(block_a: np.ndarray, tensor_b: np.ndarray) -> np.ndarray:
    """
    Minimum squared atom-atom distance for one block of residues.

    Args:
        block_a: (3, c, K) coordinates of c residues from the first molecule
        tensor_b: (3, R2, L) coordinates of the second molecule

    Returns:
        (c, R2) array; +inf where no atom pair is resolvable
    """
    # Dummy axes so that (3, c, 1, K, 1) - (3, 1, R2, 1, L) -> (3, c, R2, K, L)
    a = block_a[:, :, np.newaxis, :, np.newaxis]
    b = tensor_b[:, np.newaxis, :, np.newaxis, :]

    diff = a - b
    np.square(diff, out=diff)
    sq = diff.sum(axis=0)  # (c, R2, K, L); NaN if any coordinate missing

    sq[np.isnan(sq)] = np.inf

    # Closest atom of B for each atom of A, then closest atom of A
    return sq.min(axis=3).min(axis=2)


def min_distance_matrix(
    tensor_a: np.ndarray,
    tensor_b: np.ndarray,
    chunk_size: Optional[int] = None,
) -> np.ndarray:
    """
    Compute the residue-residue minimum distance matrix.

    Args:
        tensor_a: Coordinate tensor of the first molecule, (3, R1, K)
        tensor_b: Coordinate tensor of the second molecule, (3, R2, L)
        chunk_size: Residues of tensor_a per block (uses config default if None)

    Returns:
        (R1, R2) float array of distances in Angstroms, NaN where missing

    Raises:
        StructuralError: If a tensor does not have the (3, n_res, n_atoms) layout
        ValidationError: If chunk_size is not positive
    """
    _check_tensor(tensor_a, 'A')
    _check_tensor(tensor_b, 'B')

    if chunk_size is None:
        chunk_size = get_config().chunk_size
    if chunk_size < 1:
        raise ValidationError(f"chunk_size must be positive, got {chunk_size}")

    n_res1 = tensor_a.shape[1]
    n_res2 = tensor_b.shape[1]
    squared = np.empty((n_res1, n_res2), dtype=float)

    n_blocks = 0
    for start in range(0, n_res1, chunk_size):
        stop = min(start + chunk_size, n_res1)
        squared[start:stop] = _min_squared_distances(tensor_a[:, start:stop, :], tensor_b)
        n_blocks += 1

    logger.debug(
        "Distance matrix %dx%d computed in %d block(s) of up to %d residues",
        n_res1, n_res2, n_blocks, chunk_size,
    )

    missing = np.isinf(squared)
    distances = np.sqrt(squared)
    distances[missing] = np.nan
    return distances


def threshold_distances(distances: np.ndarray, radius: float) -> np.ndarray:
    """
    Convert a distance matrix into a boolean contact matrix.

    A cell is in contact when its distance is strictly below radius.
    Missing (NaN) distances are never in contact.
    """
    with np.errstate(invalid='ignore'):
        return np.less(distances, radius) & ~np.isnan(distances)
