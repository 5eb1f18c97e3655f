"""
CSV output writers for contact map results.

Provides functions to write contact bonds and residue-residue distance
matrices to CSV files.
"""

import csv
import math
from typing import List, Optional, Tuple

import numpy as np

from ..data_readers import Bond, Molecule


# Field definitions for output CSV files
#
# One row per contact (closest atom pair of a contacting residue pair)
CONTACT_FIELDS = [
    'chain_1', 'resnum_1', 'resname_1', 'atom_1',   # Residue/atom in molecule 1
    'chain_2', 'resnum_2', 'resname_2', 'atom_2',   # Residue/atom in molecule 2
    'distance',                                      # Closest atom-atom distance (Angstroms)
]

# One row per resolved residue pair of a raw distance matrix
DISTANCE_FIELDS = ['resnum_1', 'resnum_2', 'distance']


def _atom_owners(molecules: Tuple[Molecule, Molecule]) -> dict:
    """Map id(atom) -> residue for both molecules."""
    owners = {}
    for molecule in molecules:
        for residue in molecule.residues:
            for atom in residue.atoms:
                owners[id(atom)] = residue
    return owners


def contact_rows(bonds: List[Bond], molecules: Tuple[Molecule, Molecule]) -> List[dict]:
    """
    Build CSV rows for contact bonds.

    Args:
        bonds: Contact bonds (from ContactMap.contacts)
        molecules: The two molecules the bonds were created from

    Returns:
        List of dicts keyed by CONTACT_FIELDS
    """
    owners = _atom_owners(molecules)
    rows = []
    for bond in bonds:
        atom1, atom2 = bond.atoms
        res1 = owners.get(id(atom1))
        res2 = owners.get(id(atom2))
        rows.append({
            'chain_1': res1.chain_id if res1 else '',
            'resnum_1': res1.sequence_number if res1 else '',
            'resname_1': res1.name if res1 else '',
            'atom_1': atom1.name,
            'chain_2': res2.chain_id if res2 else '',
            'resnum_2': res2.sequence_number if res2 else '',
            'resname_2': res2.name if res2 else '',
            'atom_2': atom2.name,
            'distance': round(bond.length, 3),
        })
    return rows


def write_contacts_csv(
    bonds: List[Bond],
    molecules: Tuple[Molecule, Molecule],
    output_file: str,
) -> None:
    """
    Write contact bonds to CSV.

    Args:
        bonds: Contact bonds (from ContactMap.contacts)
        molecules: The two molecules the bonds were created from
        output_file: Path to output CSV file
    """
    with open(output_file, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=CONTACT_FIELDS)
        writer.writeheader()
        writer.writerows(contact_rows(bonds, molecules))


def write_distance_csv(
    distances: np.ndarray,
    output_file: str,
    max_distance: Optional[float] = None,
) -> None:
    """
    Write a raw residue-residue distance matrix in long format.

    Missing (NaN) pairs are skipped.

    Args:
        distances: Float matrix indexed by sequence numbers
        output_file: Path to output CSV file
        max_distance: Only write pairs at or below this distance (all if None)
    """
    with open(output_file, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=DISTANCE_FIELDS)
        writer.writeheader()
        for (i, j), dist in np.ndenumerate(distances):
            if math.isnan(dist):
                continue
            if max_distance is not None and dist > max_distance:
                continue
            writer.writerow({'resnum_1': i, 'resnum_2': j, 'distance': round(float(dist), 3)})
