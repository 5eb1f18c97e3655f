"""
Core contact map module.

This module provides the algorithms for computing residue-residue contacts
between two molecules with the closest-atom method.

- coordinates: molecule -> (3, n_res, n_atoms) coordinate tensor
- distance: tensors -> residue-residue minimum distance matrix
- bonds: contact matrix -> non-covalent Bonds
- contact_map: ContactMap interface and DistanceContactMap
"""

from .coordinates import (
    MISSING,
    build_coordinate_tensor,
    residue_index,
)

from .distance import (
    min_distance_matrix,
    threshold_distances,
)

from .bonds import (
    NON_COVALENT,
    closest_atom_pair,
    materialize_bonds,
)

from .contact_map import (
    RAW_DISTANCES,
    ContactMap,
    DistanceContactMap,
    parse_radius,
)

__all__ = [
    'MISSING',
    'build_coordinate_tensor',
    'residue_index',
    'min_distance_matrix',
    'threshold_distances',
    'NON_COVALENT',
    'closest_atom_pair',
    'materialize_bonds',
    # Contact maps
    'RAW_DISTANCES',
    'ContactMap',
    'DistanceContactMap',
    'parse_radius',
]
