"""
Bond materialization from a contact matrix.

The distance reduction only keeps which residue pairs are in contact, not
which atoms achieved the minimum. For every contacting residue pair this
module runs a second, residue-local atom-atom scan to find the closest atom
pair, and records it as a non-covalent Bond (order 0).
"""

from typing import List, Tuple
import numpy as np
from scipy.spatial.distance import cdist

from ..data_readers import Atom, Bond, Molecule, Residue
from ..errors import StructuralError
from .coordinates import residue_index

NON_COVALENT = "non-covalent"


def closest_atom_pair(
    residue1: Residue,
    residue2: Residue,
    max_atoms: int,
) -> Tuple[float, Atom, Atom]:
    """
    Find the closest atom pair between two residues.

    Only the first max_atoms atoms of each residue are considered, matching
    the coordinate tensor.

    Returns:
        Tuple of (distance, atom from residue1, atom from residue2)

    Raises:
        StructuralError: If either residue has no atoms
    """
    coords1 = residue1.coordinates(max_atoms)
    coords2 = residue2.coordinates(max_atoms)
    if len(coords1) == 0 or len(coords2) == 0:
        raise StructuralError(f"No atoms to compare between {residue1!r} and {residue2!r}")

    dist = cdist(coords1, coords2)
    k, l = np.unravel_index(np.argmin(dist), dist.shape)
    return float(dist[k, l]), residue1.atoms[k], residue2.atoms[l]


def materialize_bonds(
    mol1: Molecule,
    mol2: Molecule,
    contact_matrix: np.ndarray,
    max_atoms: int,
) -> List[Bond]:
    """
    Create one non-covalent Bond per contact and attach them to mol1.

    Contacts are visited in row-major order (residue of mol1, then residue
    of mol2), so the bond order is stable for a given matrix.

    Side effect: every created bond is added to mol1 via add_bond(). Bonds
    are only attached once all of them were created successfully.

    Args:
        mol1: First molecule (rows of the matrix); receives the bonds
        mol2: Second molecule (columns of the matrix)
        contact_matrix: Boolean matrix indexed by sequence numbers
        max_atoms: Atom slots per residue used to build the matrix

    Returns:
        List of created Bond objects

    Raises:
        StructuralError: If a contact refers to a sequence number without a residue
    """
    residues1 = residue_index(mol1)
    residues2 = residue_index(mol2)

    bonds = []
    for i, j in np.argwhere(contact_matrix > 0):
        i, j = int(i), int(j)
        residue1 = residues1.get(i)
        residue2 = residues2.get(j)
        if residue1 is None or residue2 is None:
            raise StructuralError(
                f"Contact ({i}, {j}) refers to a residue missing from "
                f"{mol1.name!r} or {mol2.name!r}"
            )

        _, atom1, atom2 = closest_atom_pair(residue1, residue2, max_atoms)
        bonds.append(Bond(atoms=(atom1, atom2), type=NON_COVALENT, order=0))

    for bond in bonds:
        mol1.add_bond(bond)

    return bonds
