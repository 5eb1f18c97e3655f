"""
Structure input for contact map calculations.

- base: Molecule / Residue / Atom / Bond data model
- pdb: PDB reader (paths, text or open streams)
- molpair: coercion of structure pairs into two validated molecules
"""

from .base import Atom, Bond, Molecule, ReaderError, Residue
from .pdb import PDBReader, read_molecule
from .molpair import MolPair, classify_source, coerce_structures

__all__ = [
    'Atom', 'Bond', 'Molecule', 'ReaderError', 'Residue',
    'PDBReader', 'read_molecule',
    'MolPair', 'classify_source', 'coerce_structures',
]
