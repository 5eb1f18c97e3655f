"""
Coercion of structure inputs into a validated molecule pair.

A contact map always works on exactly two molecules. Callers may supply
them in any of three shapes, which are dispatched explicitly:

- a pair of Molecule objects (used as-is)
- a pair of open readable streams containing PDB data
- a pair of strings or paths (PDB file paths or PDB-formatted text)

Mixing shapes within one pair is rejected.
"""

from pathlib import Path
from typing import Any, Sequence, Tuple

from .base import Molecule, ReaderError
from .pdb import read_molecule
from ..errors import ValidationError

MolPair = Tuple[Molecule, Molecule]


def _is_stream(obj: Any) -> bool:
    return hasattr(obj, 'read') and callable(obj.read)


def _is_text_source(obj: Any) -> bool:
    return isinstance(obj, (str, Path))


def classify_source(obj: Any) -> str:
    """
    Classify one element of a structure pair.

    Returns:
        'molecule', 'stream' or 'text'

    Raises:
        ValidationError: If the element has an unsupported type
    """
    if isinstance(obj, Molecule):
        return 'molecule'
    if _is_stream(obj):
        return 'stream'
    if _is_text_source(obj):
        return 'text'
    raise ValidationError(
        f"Unsupported structure type {type(obj).__name__}: "
        f"expected Molecule, readable stream, or PDB path/text"
    )


def coerce_structures(structures: Sequence[Any]) -> MolPair:
    """
    Normalize a structure pair into exactly two Molecules.

    Args:
        structures: List or tuple of two Molecules, two readable streams,
                    or two PDB paths/texts

    Returns:
        Tuple of two Molecule objects

    Raises:
        ValidationError: If the collection does not hold exactly two elements,
                         the elements are of mixed or unsupported types, or a
                         source cannot be parsed into a molecule
    """
    if isinstance(structures, (str, bytes, Path)) or not isinstance(structures, (list, tuple)):
        raise ValidationError(
            f"Structures must be a list or tuple of two elements, got {type(structures).__name__}"
        )
    if len(structures) != 2:
        raise ValidationError(f"Need exactly two structures, got {len(structures)}")

    kinds = {classify_source(obj) for obj in structures}
    if len(kinds) != 1:
        raise ValidationError(
            f"Structures must be of one kind, got a mix of {', '.join(sorted(kinds))}"
        )

    kind = kinds.pop()
    if kind == 'molecule':
        return structures[0], structures[1]

    molecules = []
    for source in structures:
        try:
            molecules.append(read_molecule(source))
        except ReaderError as e:
            raise ValidationError(f"Not a valid molecule: {e}") from e

    return molecules[0], molecules[1]
