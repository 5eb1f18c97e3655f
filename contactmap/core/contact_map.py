"""
Contact maps between two macromolecules.

ContactMap is the abstract interface: it owns the pair of structures and a
lazily built, cached list of contacts (non-covalent Bonds). Subclasses
supply _build_contacts().

DistanceContactMap implements the closest-atom method: two residues are in
contact when their closest atom-atom distance is below `radius`. Typically
the cutoff is 6 Angstroms (Fischer et al., J. Struct. Biol. 153:103-112,
2006), but any non-negative value can be used. With radius -1 the raw
residue-residue minimum distances are kept instead of a contact matrix.

Usage:
    cmap = DistanceContactMap()
    cmap.calculate(mol1, mol2, radius=6)

    # Are residue 4 of mol1 and residue 200 of mol2 in contact?
    if cmap[4, 200]:
        ...

    for bond in cmap.contacts:   # bonds are also attached to mol1
        print(bond)

    cmap.save('contact_map.npz')
    cmap2 = DistanceContactMap.load('contact_map.npz')
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union
import numbers
import re
import threading
import numpy as np

from ..config import get_config
from ..data_readers import Bond, MolPair, coerce_structures
from ..errors import PreconditionError, ValidationError
from ..logging_config import get_logger
from ..output_writers.matrix_io import load_matrix, save_matrix
from .bonds import materialize_bonds
from .coordinates import build_coordinate_tensor, residue_index
from .distance import min_distance_matrix, threshold_distances

logger = get_logger(__name__)

# Radius meaning "keep raw distances, no thresholding"
RAW_DISTANCES = -1.0

# Digits with an optional decimal part, or exactly -1
_RADIUS_PATTERN = re.compile(r'^(?:[0-9]+(?:\.[0-9]+)?|-1)$')

_RADIUS_ERROR = "Distance threshold is not a number"


def parse_radius(value: Any) -> float:
    """
    Validate a distance threshold.

    Accepts -1, non-negative finite numbers, and strings of the form
    '6', '6.0' or '-1'.

    Returns:
        The radius as a float

    Raises:
        ValidationError: For anything else
    """
    if isinstance(value, bool):
        raise ValidationError(_RADIUS_ERROR)

    if isinstance(value, numbers.Real):
        radius = float(value)
        if radius == RAW_DISTANCES or (np.isfinite(radius) and radius >= 0):
            return radius
        raise ValidationError(_RADIUS_ERROR)

    if isinstance(value, str) and _RADIUS_PATTERN.match(value.strip()):
        return float(value)

    raise ValidationError(_RADIUS_ERROR)


class ContactMap(ABC):
    """
    Abstract contact map between two molecules.

    Provides the `structures` pair (coerced from Molecules, streams or PDB
    paths/text) and the cached `contacts` list. Subclasses implement
    _build_contacts().
    """

    def __init__(self, structures: Optional[Sequence[Any]] = None):
        self._structures: Optional[MolPair] = None
        self._contacts: Optional[List[Bond]] = None
        self._contacts_lock = threading.Lock()

        if structures is not None:
            self.structures = structures

    @property
    def structures(self) -> Optional[MolPair]:
        """The two molecules, or None if not set yet."""
        return self._structures

    @structures.setter
    def structures(self, value: Sequence[Any]) -> None:
        structures = coerce_structures(value)
        self._accept_structures(structures)
        self._release_contacts()
        self._structures = structures

    def _accept_structures(self, structures: MolPair) -> None:
        """Hook run before a new pair is stored; may raise to reject it."""

    def _release_contacts(self) -> None:
        """
        Drop the cached contacts and detach them from the first molecule.

        Keeps the first molecule at one bond per contact of the current
        calculation when the map is recalculated or its structures replaced.
        """
        with self._contacts_lock:
            if self._contacts and self._structures is not None:
                attached = {id(bond) for bond in self._contacts}
                owner = self._structures[0]
                owner.bonds[:] = [bond for bond in owner.bonds if id(bond) not in attached]
            self._contacts = None

    @property
    def contacts(self) -> List[Bond]:
        """
        Contacts as non-covalent Bonds.

        The first access calls materialize_bonds(), which attaches the bonds
        to the first molecule; later accesses return the same list.
        """
        return self.materialize_bonds()

    def materialize_bonds(self) -> List[Bond]:
        """
        Build the contact list once and cache it.

        Side effect: the first call attaches every contact Bond to the first
        molecule of `structures`. Later calls (from any thread) return the
        cached list without attaching anything again.
        """
        if self._contacts is not None:
            return self._contacts

        with self._contacts_lock:
            if self._contacts is None:
                self._contacts = self._build_contacts()
                logger.debug("Materialized %d contacts", len(self._contacts))

        return self._contacts

    @property
    def is_materialized(self) -> bool:
        """Whether the contact list has been built."""
        return self._contacts is not None

    @abstractmethod
    def _build_contacts(self) -> List[Bond]:
        """Create the contact Bonds (called at most once per calculation)."""


class DistanceContactMap(ContactMap):
    """
    Contact map computed with the closest-atom method.

    Attributes:
        radius: Distance threshold in Angstroms, or -1 for raw distances
        chunk_size: Residues per distance block (config default if None)
        max_atoms: Atom slots per residue (config default if None)
    """

    def __init__(
        self,
        structures: Optional[Sequence[Any]] = None,
        radius: Any = None,
        chunk_size: Optional[int] = None,
        max_atoms: Optional[int] = None,
    ):
        self._radius: Optional[float] = None
        self._matrix: Optional[np.ndarray] = None
        # Radius the matrix was computed with, and whether it came from a file
        self._matrix_radius: Optional[float] = None
        self._matrix_loaded = False
        super().__init__(structures)

        config = get_config()
        self.chunk_size = chunk_size if chunk_size is not None else config.chunk_size
        self.max_atoms = max_atoms if max_atoms is not None else config.max_atoms

        if radius is not None:
            self.radius = radius

    @property
    def radius(self) -> Optional[float]:
        """Distance threshold (-1 means raw distances)."""
        return self._radius

    @radius.setter
    def radius(self, value: Any) -> None:
        self._radius = parse_radius(value)

    @property
    def matrix(self) -> Optional[np.ndarray]:
        """
        The calculated matrix (read-only), or None before calculate().

        Boolean contact matrix when thresholded, otherwise float distances
        with NaN for missing residue pairs. Indexed by sequence numbers.
        """
        return self._matrix

    @property
    def is_thresholded(self) -> bool:
        """Whether the matrix is a boolean contact matrix."""
        return self._matrix is not None and self._matrix.dtype == bool

    def _accept_structures(self, structures: MolPair) -> None:
        """
        Keep the matrix consistent with a newly assigned pair.

        A calculated matrix belongs to the pair it was computed from and is
        discarded. A loaded matrix is kept if its shape matches the pair.
        """
        if self._matrix is None:
            return

        if not self._matrix_loaded:
            self._matrix = None
            self._matrix_radius = None
            return

        expected = tuple(max(residue_index(mol), default=-1) + 1 for mol in structures)
        if self._matrix.shape != expected:
            raise ValidationError(
                f"Structures do not match the loaded matrix: expected shape "
                f"{self._matrix.shape}, got {expected}"
            )

    def calculate(self, mol1: Any = None, mol2: Any = None, radius: Any = None) -> bool:
        """
        Calculate contacts between mol1 and mol2.

        Arguments override the stored `structures` and `radius`; when
        omitted, the stored values are used. Given arguments are stored on
        success. A failed calculation leaves the previous state untouched.

        Args:
            mol1, mol2: Molecules, open PDB streams, or PDB paths/text
            radius: Distance threshold, or -1 to keep raw distances

        Returns:
            True

        Raises:
            PreconditionError: If no molecule pair or radius is available
            ValidationError: If the radius or the structures are invalid
            StructuralError: If a molecule cannot be mapped to coordinates
        """
        if mol1 is not None and mol2 is not None:
            structures = coerce_structures([mol1, mol2])
        elif mol1 is not None or mol2 is not None:
            raise PreconditionError("Both mol1 and mol2 must be given, or neither")
        elif self._structures is not None:
            structures = self._structures
        else:
            raise PreconditionError("Need two molecules to calculate a contact map")

        if radius is not None:
            radius = parse_radius(radius)
        elif self._radius is not None:
            radius = self._radius
        else:
            raise PreconditionError("Radius has not been set")

        first, second = structures
        distances = min_distance_matrix(
            build_coordinate_tensor(first, self.max_atoms),
            build_coordinate_tensor(second, self.max_atoms),
            chunk_size=self.chunk_size,
        )

        if radius == RAW_DISTANCES:
            matrix = distances
        else:
            matrix = threshold_distances(distances, radius)
        matrix.flags.writeable = False

        self._release_contacts()
        self._structures = structures
        self._radius = radius
        self._matrix = matrix
        self._matrix_radius = radius
        self._matrix_loaded = False

        logger.debug(
            "Calculated %s matrix %s for %r vs %r (radius %s)",
            "contact" if self.is_thresholded else "distance",
            matrix.shape, first.name, second.name, radius,
        )
        return True

    def __getitem__(self, key: Union[Tuple[int, int], Any]) -> Any:
        """Matrix cell(s) by sequence numbers, e.g. cmap[4, 200]."""
        return self._require_matrix()[key]

    def contact_pairs(self) -> List[Tuple[int, int]]:
        """Sequence number pairs (mol1, mol2) in contact, row-major order."""
        matrix = self._require_thresholded()
        return [(int(i), int(j)) for i, j in np.argwhere(matrix)]

    def _build_contacts(self) -> List[Bond]:
        matrix = self._require_thresholded()
        if self._structures is None:
            raise PreconditionError("Structures are required to create contact bonds")

        mol1, mol2 = self._structures
        return materialize_bonds(mol1, mol2, matrix, self.max_atoms)

    def _require_matrix(self) -> np.ndarray:
        if self._matrix is None:
            raise PreconditionError("No matrix: call calculate() first")
        return self._matrix

    def _require_thresholded(self) -> np.ndarray:
        matrix = self._require_matrix()
        if not self.is_thresholded:
            raise PreconditionError(
                "Contacts are undefined for a raw distance matrix (radius -1)"
            )
        return matrix

    def save(self, path: Union[str, Path]) -> None:
        """Save the matrix and radius to an .npz file."""
        save_matrix(path, self._require_matrix(), self._matrix_radius)

    @classmethod
    def load(cls, path: Union[str, Path], structures: Optional[Sequence[Any]] = None) -> "DistanceContactMap":
        """
        Load a contact map saved with save().

        Structures are not stored in the file; pass them (or assign
        `structures` later) to materialize contacts. Their sequence
        numbering must match the matrix shape.
        """
        matrix, radius = load_matrix(path)
        try:
            radius = parse_radius(radius)
        except ValidationError as e:
            raise ValidationError(f"{path}: invalid stored radius {radius!r}") from e

        cmap = cls()
        cmap._radius = radius
        matrix.flags.writeable = False
        cmap._matrix = matrix
        cmap._matrix_radius = radius
        cmap._matrix_loaded = True

        if structures is not None:
            cmap.structures = structures
        return cmap

    def to_text(self) -> str:
        """Human-readable summary of the map."""
        if self._structures is not None:
            names = " vs ".join(repr(mol.name) for mol in self._structures)
        else:
            names = "<no structures>"

        if self._matrix is None:
            return f"DistanceContactMap({names}, radius={self._radius}, not calculated)"

        lines = [f"DistanceContactMap({names}, radius={self._radius}, shape={self._matrix.shape})"]
        if self.is_thresholded:
            pairs = self.contact_pairs()
            lines.append(f"{len(pairs)} contact(s)")
            lines.extend(f"  {i}\t{j}" for i, j in pairs)
        else:
            finite = self._matrix[~np.isnan(self._matrix)]
            if finite.size:
                lines.append(
                    f"min distance {finite.min():.3f}, max distance {finite.max():.3f}, "
                    f"{finite.size} resolved pair(s)"
                )
            else:
                lines.append("no resolved residue pairs")
        return "\n".join(lines)

    def __repr__(self) -> str:
        shape = None if self._matrix is None else self._matrix.shape
        return f"DistanceContactMap(radius={self._radius}, shape={shape})"
