"""
Base data model for structures handled by the contact map engine.

This module provides the small molecule object model the rest of the package
works with: atoms grouped into residues grouped into a molecule, plus the
bond records created when contacts are materialized.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np


@dataclass(eq=False)
class Atom:
    """
    A single atom with Cartesian coordinates.

    Attributes:
        name: PDB atom name (e.g., 'CA', 'CB', 'OG1')
        x, y, z: Coordinates in Angstroms
        element: Element symbol (e.g., 'C', 'N')
        serial: Atom serial number from the source file (optional)
    """
    name: str
    x: float
    y: float
    z: float
    element: str = ""
    serial: Optional[int] = None

    @property
    def coords(self) -> np.ndarray:
        """Coordinates as a length-3 float array."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def __repr__(self) -> str:
        return f"Atom({self.name!r}, {self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


@dataclass(eq=False)
class Residue:
    """
    A residue: an ordered group of atoms at one sequence position.

    Attributes:
        name: Residue name (e.g., 'ALA', 'GLY')
        sequence_number: Residue sequence number (not necessarily contiguous)
        atoms: Ordered list of heavy atoms
        chain_id: Chain identifier (optional)
        insertion_code: PDB insertion code (usually blank)
    """
    name: str
    sequence_number: int
    atoms: List[Atom] = field(default_factory=list)
    chain_id: str = ""
    insertion_code: str = ""

    def add_atom(self, atom: Atom) -> None:
        """Append an atom to this residue."""
        self.atoms.append(atom)

    def coordinates(self, max_atoms: Optional[int] = None) -> np.ndarray:
        """
        Get atom coordinates as an (N, 3) array.

        Args:
            max_atoms: Only use the first max_atoms atoms (all if None)
        """
        atoms = self.atoms if max_atoms is None else self.atoms[:max_atoms]
        if not atoms:
            return np.empty((0, 3), dtype=float)
        return np.array([[a.x, a.y, a.z] for a in atoms], dtype=float)

    def __repr__(self) -> str:
        chain = f"{self.chain_id}:" if self.chain_id else ""
        return f"Residue({chain}{self.name}{self.sequence_number}, {len(self.atoms)} atoms)"


@dataclass(eq=False)
class Bond:
    """
    A bond between two atoms.

    Contacts are represented as bonds with type 'non-covalent' and order 0.

    Attributes:
        atoms: The two bonded atoms
        type: Bond type tag
        order: Bond order
    """
    atoms: Tuple[Atom, Atom]
    type: str = "non-covalent"
    order: int = 0

    @property
    def length(self) -> float:
        """Euclidean distance between the two atoms."""
        atom1, atom2 = self.atoms
        return float(np.linalg.norm(atom1.coords - atom2.coords))

    def __repr__(self) -> str:
        atom1, atom2 = self.atoms
        return f"Bond({self.type}, {atom1.name}-{atom2.name}, {self.length:.2f})"


@dataclass(eq=False)
class Molecule:
    """
    A macromolecule (typically one protein chain).

    Attributes:
        name: Identifier, usually derived from the source file
        residues: Ordered list of residues
        bonds: Bonds attached to this molecule
    """
    name: str = ""
    residues: List[Residue] = field(default_factory=list)
    bonds: List[Bond] = field(default_factory=list)

    def add_residue(self, residue: Residue) -> None:
        """Append a residue to this molecule."""
        self.residues.append(residue)

    def add_bond(self, bond: Bond) -> None:
        """Attach a bond to this molecule."""
        self.bonds.append(bond)

    @property
    def num_residues(self) -> int:
        """Number of residues in the molecule."""
        return len(self.residues)

    @property
    def max_sequence_number(self) -> int:
        """Highest residue sequence number (-1 for an empty molecule)."""
        if not self.residues:
            return -1
        return max(res.sequence_number for res in self.residues)

    @property
    def chains(self) -> List[str]:
        """List of unique chain IDs in residue order."""
        return list(dict.fromkeys(res.chain_id for res in self.residues))

    def __repr__(self) -> str:
        return f"Molecule({self.name!r}, {len(self.residues)} residues, {len(self.bonds)} bonds)"


class ReaderError(Exception):
    """Exception raised for errors during structure reading."""
    pass
