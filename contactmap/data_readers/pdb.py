"""
PDB structure reader.

Reads ATOM/HETATM records from PDB-formatted data into a Molecule:
- Source: a file path, PDB-formatted text, or an open (text or binary) stream
- Only the first MODEL is read
- Hydrogens, waters and non-primary alternate locations are skipped

Fixed-column parsing follows the wwPDB format description.
"""

import os
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from .base import Atom, Molecule, Residue, ReaderError
from ..logging_config import get_logger

logger = get_logger(__name__)

PDBSource = Union[str, Path, object]


class PDBReader:
    """Reader for PDB-formatted structure data."""

    # Water residue names
    WATER_RESIDUES = {"HOH", "WAT", "H2O", "DOD"}

    # Hydrogen and deuterium element symbols
    HYDROGEN_ELEMENTS = {"H", "D"}

    # Accepted alternate location indicators
    PRIMARY_ALTLOCS = {"", "A", "1"}

    def __init__(self, chain: Optional[str] = None):
        """
        Initialize the reader.

        Args:
            chain: Only read residues of this chain (all chains if None)
        """
        self.chain = chain

    def read(self, source: PDBSource, name: Optional[str] = None) -> Molecule:
        """
        Read a Molecule from a path, PDB text or an open stream.

        Args:
            source: Path to a PDB file, PDB-formatted text, or a readable stream
            name: Molecule name (defaults to the file stem when reading a file)

        Returns:
            Molecule with at least one residue

        Raises:
            ReaderError: If the source cannot be read or contains no residues
        """
        text, default_name = self._load_text(source)
        molecule = self.parse(text.splitlines(), name=name or default_name)

        if not molecule.residues:
            raise ReaderError(
                f"No residues found in PDB source {default_name or '<text>'!r}"
            )

        logger.debug(
            "Read %s: %d residues, %d atoms",
            molecule.name or "<text>",
            molecule.num_residues,
            sum(len(res.atoms) for res in molecule.residues),
        )
        return molecule

    def parse(self, lines: Iterable[str], name: str = "") -> Molecule:
        """
        Parse PDB lines into a Molecule.

        Residues are keyed by (chain, residue number, insertion code) and kept
        in file order.
        """
        molecule = Molecule(name=name)
        residues = {}

        for line in lines:
            if line.startswith('ENDMDL'):
                # First model only
                break
            if not (line.startswith('ATOM') or line.startswith('HETATM')):
                continue

            parsed = self._parse_atom_line(line)
            if parsed is None:
                continue

            atom, residue_name, chain_id, residue_num, icode, altloc = parsed

            if residue_name in self.WATER_RESIDUES:
                continue
            if atom.element in self.HYDROGEN_ELEMENTS:
                continue
            if altloc not in self.PRIMARY_ALTLOCS:
                continue
            if self.chain is not None and chain_id != self.chain:
                continue

            residue_key = (chain_id, residue_num, icode)
            residue = residues.get(residue_key)
            if residue is None:
                residue = Residue(
                    name=residue_name,
                    sequence_number=residue_num,
                    chain_id=chain_id,
                    insertion_code=icode,
                )
                residues[residue_key] = residue
                molecule.add_residue(residue)

            residue.add_atom(atom)

        return molecule

    def _parse_atom_line(
        self, line: str
    ) -> Optional[Tuple[Atom, str, str, int, str, str]]:
        """Parse a single ATOM/HETATM line (fixed format)."""
        try:
            serial = int(line[6:11].strip() or 0)
            atom_name = line[12:16].strip()
            altloc = line[16:17].strip()
            residue_name = line[17:20].strip()
            chain_id = line[21:22].strip()
            residue_num = int(line[22:26].strip())
            icode = line[26:27].strip()
            x = float(line[30:38].strip())
            y = float(line[38:46].strip())
            z = float(line[46:54].strip())
        except (ValueError, IndexError):
            return None

        element = line[76:78].strip().upper() if len(line) >= 78 else ""
        if not element:
            element = _guess_element(atom_name)

        atom = Atom(name=atom_name, x=x, y=y, z=z, element=element, serial=serial)
        return atom, residue_name, chain_id, residue_num, icode, altloc

    def _load_text(self, source: PDBSource) -> Tuple[str, str]:
        """Return (text, default_name) for any accepted source form."""
        if hasattr(source, 'read'):
            data = source.read()
            if isinstance(data, bytes):
                data = data.decode('utf-8', errors='replace')
            if not isinstance(data, str):
                raise ReaderError(f"Stream returned unsupported data type {type(data).__name__}")
            stream_name = getattr(source, 'name', '')
            default_name = Path(stream_name).stem if isinstance(stream_name, str) and stream_name else ""
            return data, default_name

        if isinstance(source, Path):
            return self._read_file(source)

        if isinstance(source, str):
            # Single-line strings are treated as file paths
            if '\n' not in source:
                if os.path.isfile(source):
                    return self._read_file(Path(source))
                if not source.startswith(('ATOM', 'HETATM')):
                    raise ReaderError(f"Not a PDB file or PDB text: {source!r}")
            return source, ""

        raise ReaderError(f"Unsupported PDB source type: {type(source).__name__}")

    def _read_file(self, path: Path) -> Tuple[str, str]:
        try:
            with open(path, 'r') as f:
                return f.read(), path.stem
        except OSError as e:
            raise ReaderError(f"Cannot read PDB file {path}: {e}") from e


def _guess_element(atom_name: str) -> str:
    """Guess the element from an atom name when columns 77-78 are blank."""
    letters = ''.join(c for c in atom_name if c.isalpha())
    return letters[:1].upper() if letters else ""


def read_molecule(
    source: PDBSource,
    name: Optional[str] = None,
    chain: Optional[str] = None,
) -> Molecule:
    """
    Read a Molecule from PDB data.

    Args:
        source: Path to a PDB file, PDB-formatted text, or an open stream
        name: Molecule name (defaults to the file stem)
        chain: Only read this chain (all chains if None)

    Returns:
        Parsed Molecule

    Raises:
        ReaderError: If the source is unreadable or contains no residues
    """
    return PDBReader(chain=chain).read(source, name=name)

