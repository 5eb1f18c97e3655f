"""
Output writers for contact map results.

Output types:
- Contacts: One row per contact bond (closest atom pair per residue pair)
- Distances: One row per resolved residue pair of a raw distance matrix
- Matrix: Compressed .npz archive of the matrix and its radius
"""

from .csv_writer import (
    write_contacts_csv,
    write_distance_csv,
    contact_rows,
    CONTACT_FIELDS,
    DISTANCE_FIELDS,
)

from .matrix_io import (
    save_matrix,
    load_matrix,
)

__all__ = [
    'write_contacts_csv',
    'write_distance_csv',
    'contact_rows',
    'CONTACT_FIELDS',
    'DISTANCE_FIELDS',
    'save_matrix',
    'load_matrix',
]
