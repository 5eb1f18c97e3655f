"""
contactmap - Residue-residue contact maps between macromolecules.

Computes, for every residue pair across two molecules, the minimum
atom-atom distance and thresholds it to decide whether the residues are in
contact (closest-atom method). Contacts are returned as a boolean matrix and
as non-covalent bonds attached back to the first molecule.

Main modules:
- data_readers: Molecule data model, PDB reader, structure pair coercion
- core: Coordinate tensors, distance matrices, contact maps, bonds
- output_writers: CSV and matrix (.npz) output
- graphics: Contact map figures (optional, requires matplotlib)

Command-line interface:
    python -m contactmap <mol1.pdb> <mol2.pdb> [options]
    contactmap <mol1.pdb> <mol2.pdb> [options]  # If installed via pip
"""

__version__ = "0.1.0"

# Expose main classes and functions at package level
from .errors import ContactMapError, ValidationError, PreconditionError, StructuralError
from .config import ContactMapConfig, get_config, set_config
from .data_readers import Atom, Residue, Molecule, Bond, ReaderError, read_molecule, coerce_structures
from .core import (
    ContactMap,
    DistanceContactMap,
    RAW_DISTANCES,
    build_coordinate_tensor,
    min_distance_matrix,
    materialize_bonds,
)

__all__ = [
    # Version info
    "__version__",
    # Errors
    "ContactMapError",
    "ValidationError",
    "PreconditionError",
    "StructuralError",
    "ReaderError",
    # Configuration
    "ContactMapConfig",
    "get_config",
    "set_config",
    # Data model
    "Atom",
    "Residue",
    "Molecule",
    "Bond",
    "read_molecule",
    "coerce_structures",
    # Contact maps
    "ContactMap",
    "DistanceContactMap",
    "RAW_DISTANCES",
    "build_coordinate_tensor",
    "min_distance_matrix",
    "materialize_bonds",
]
