"""
Coordinate tensor construction.

Converts a Molecule into a dense (3, max_seq + 1, max_atoms) array:
- axis 0: x, y, z
- axis 1: residue sequence number
- axis 2: atom slot within the residue

Slots without an atom, and sequence numbers without a residue, hold NaN.
"""

from typing import Optional
import numbers
import numpy as np

from ..config import get_config
from ..data_readers import Molecule
from ..errors import StructuralError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Marker for absent coordinates and distances
MISSING = np.nan


def _sequence_number(residue) -> int:
    seq = residue.sequence_number
    if isinstance(seq, bool) or not isinstance(seq, numbers.Integral):
        raise StructuralError(f"Residue {residue!r} has a non-integer sequence number: {seq!r}")
    if seq < 0:
        raise StructuralError(f"Residue {residue!r} has a negative sequence number: {seq}")
    return int(seq)


def build_coordinate_tensor(molecule: Molecule, max_atoms: Optional[int] = None) -> np.ndarray:
    """
    Build the coordinate tensor for a molecule.

    Only the first max_atoms atoms of each residue are used. Duplicate
    sequence numbers (e.g. several chains in one molecule) are allowed;
    the residue that comes last wins.

    Args:
        molecule: Molecule to read
        max_atoms: Atom slots per residue (uses config default if None)

    Returns:
        Float array of shape (3, max_seq + 1, max_atoms), NaN where missing

    Raises:
        StructuralError: If the molecule has no residues or a residue has an
                         unusable sequence number
    """
    if max_atoms is None:
        max_atoms = get_config().max_atoms

    if not molecule.residues:
        raise StructuralError(f"Molecule {molecule.name!r} has no residues")

    seq_numbers = [_sequence_number(res) for res in molecule.residues]
    max_seq = max(seq_numbers)

    tensor = np.full((3, max_seq + 1, max_atoms), MISSING, dtype=float)

    seen = set()
    for residue, seq in zip(molecule.residues, seq_numbers):
        if seq in seen:
            logger.warning(
                "Molecule %r: duplicate sequence number %d, %r replaces the earlier residue",
                molecule.name, seq, residue,
            )
            tensor[:, seq, :] = MISSING
        seen.add(seq)

        coords = residue.coordinates(max_atoms)
        if len(coords):
            tensor[:, seq, :len(coords)] = coords.T

    logger.debug(
        "Coordinate tensor for %r: shape %s, %d residues",
        molecule.name, tensor.shape, len(seen),
    )
    return tensor


def residue_index(molecule: Molecule) -> dict:
    """
    Map sequence number -> Residue (last residue wins on duplicates).

    This is the reverse lookup matching build_coordinate_tensor().
    """
    return {_sequence_number(res): res for res in molecule.residues}
