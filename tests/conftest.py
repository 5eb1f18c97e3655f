"""Shared pytest fixtures for contactmap tests."""

import pytest

from contactmap.config import ContactMapConfig, set_config
from contactmap.data_readers import Atom, Molecule, Residue


@pytest.fixture(autouse=True)
def default_config():
    """Reset the global configuration around every test."""
    set_config(ContactMapConfig())
    yield
    set_config(ContactMapConfig())


def build_molecule(name, residues):
    """
    Build a Molecule from {sequence_number: [(x, y, z), ...]}.

    Atoms are named A0, A1, ... within each residue.
    """
    molecule = Molecule(name=name)
    for seq, coords in residues.items():
        residue = Residue(name="ALA", sequence_number=seq, chain_id="A")
        for k, (x, y, z) in enumerate(coords):
            residue.add_atom(Atom(name=f"A{k}", x=x, y=y, z=z, element="C"))
        molecule.add_residue(residue)
    return molecule


@pytest.fixture
def make_molecule():
    """Return the molecule factory."""
    return build_molecule


def pdb_atom_line(serial, name, resname, chain, resnum, x, y, z, element="C", record="ATOM"):
    """Format one fixed-column PDB ATOM/HETATM record."""
    return (
        f"{record:<6s}{serial:5d} {name:<4s} {resname:>3s} {chain:1s}{resnum:4d}    "
        f"{x:8.3f}{y:8.3f}{z:8.3f}{1.0:6.2f}{0.0:6.2f}          {element:>2s}"
    )


@pytest.fixture
def pdb_line():
    """Return the PDB line formatter."""
    return pdb_atom_line


@pytest.fixture
def pdb_text_a():
    """Chain A: GLY 1 near the origin, ALA 2 far away."""
    lines = [
        pdb_atom_line(1, "N", "GLY", "A", 1, 0.0, 0.0, 0.0, "N"),
        pdb_atom_line(2, "CA", "GLY", "A", 1, 1.0, 0.0, 0.0),
        pdb_atom_line(3, "H", "GLY", "A", 1, 0.5, 0.5, 0.0, "H"),
        pdb_atom_line(4, "N", "ALA", "A", 2, 20.0, 0.0, 0.0, "N"),
        pdb_atom_line(5, "CA", "ALA", "A", 2, 21.0, 0.0, 0.0),
        pdb_atom_line(6, "CB", "ALA", "A", 2, 21.0, 1.0, 0.0),
        pdb_atom_line(7, "O", "HOH", "A", 101, 5.0, 5.0, 5.0, "O", record="HETATM"),
        "END",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def pdb_text_b():
    """Chain B: SER 5 at 3 A from GLY 1 of chain A, LEU 7 far from everything."""
    lines = [
        pdb_atom_line(1, "N", "SER", "B", 5, 0.0, 0.0, 4.0, "N"),
        pdb_atom_line(2, "OG", "SER", "B", 5, 1.0, 0.0, 3.0, "O"),
        pdb_atom_line(3, "N", "LEU", "B", 7, 50.0, 0.0, 0.0, "N"),
        pdb_atom_line(4, "CA", "LEU", "B", 7, 51.0, 0.0, 0.0),
        "END",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def pdb_files(tmp_path, pdb_text_a, pdb_text_b):
    """Write both PDB texts to files and return their paths."""
    path_a = tmp_path / "chainA.pdb"
    path_b = tmp_path / "chainB.pdb"
    path_a.write_text(pdb_text_a)
    path_b.write_text(pdb_text_b)
    return path_a, path_b
