#!/usr/bin/env python3
"""
contactmap CLI - Residue-residue contacts between two macromolecules

Reads two PDB structures, computes the closest-atom contact map and writes
the contacts (one closest atom pair per contacting residue pair) to CSV.
With --radius -1 the raw residue-residue minimum distances are written
instead.

Usage:
    python -m contactmap <mol1.pdb> <mol2.pdb> [options]
    contactmap <mol1.pdb> <mol2.pdb> [options]  # If installed via pip

Example:
    contactmap receptor.pdb ligand.pdb --radius 6 --output_dir ./results
    contactmap complex.pdb complex.pdb --chain1 A --chain2 B --png
    contactmap a.pdb b.pdb --radius -1 --save_matrix
"""

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from .config import get_config, set_config, load_config_from_csv
from .core import DistanceContactMap, RAW_DISTANCES
from .data_readers import ReaderError, read_molecule
from .errors import ContactMapError
from .logging_config import get_logger, setup_logging
from .output_writers import write_contacts_csv, write_distance_csv

logger = get_logger(__name__)


def run(
    mol1_path: str,
    mol2_path: str,
    radius: float,
    output_dir: Optional[str] = None,
    prefix: Optional[str] = None,
    chain1: Optional[str] = None,
    chain2: Optional[str] = None,
    save_matrix: bool = False,
    png: bool = False,
    chunk_size: Optional[int] = None,
) -> DistanceContactMap:
    """
    Calculate a contact map and write its outputs.

    Args:
        mol1_path: PDB file of the first molecule (receives the contact bonds)
        mol2_path: PDB file of the second molecule
        radius: Distance threshold in Angstroms, or -1 for raw distances
        output_dir: Output directory (default: directory of mol1_path)
        prefix: Output file prefix (default: <mol1>_<mol2>)
        chain1: Only read this chain from mol1_path
        chain2: Only read this chain from mol2_path
        save_matrix: Also save the matrix as .npz
        png: Also save a contact map figure
        chunk_size: Residues per distance block (config default if None)

    Returns:
        The calculated DistanceContactMap
    """
    start_time = time.time()

    mol1 = read_molecule(mol1_path, chain=chain1)
    mol2 = read_molecule(mol2_path, chain=chain2)
    if chain1:
        mol1.name = f"{mol1.name}_{chain1}"
    if chain2:
        mol2.name = f"{mol2.name}_{chain2}"

    print(f"Molecule 1: {mol1.name} ({mol1.num_residues} residues)")
    print(f"Molecule 2: {mol2.name} ({mol2.num_residues} residues)")

    cmap = DistanceContactMap(chunk_size=chunk_size)
    cmap.calculate(mol1, mol2, radius=radius)

    if output_dir is None:
        output_dir = os.path.dirname(os.path.abspath(mol1_path))
    if not os.path.exists(output_dir):
        os.makedirs(output_dir)
    if prefix is None:
        prefix = f"{mol1.name}_{mol2.name}"

    if cmap.radius == RAW_DISTANCES:
        distance_output = os.path.join(output_dir, f"{prefix}_distances.csv")
        write_distance_csv(cmap.matrix, distance_output)
        print(f"Distances: {distance_output}")
    else:
        contacts = cmap.contacts
        contacts_output = os.path.join(output_dir, f"{prefix}_contacts.csv")
        write_contacts_csv(contacts, cmap.structures, contacts_output)
        print(f"Contacts found: {len(contacts)}")
        print(f"Contacts: {contacts_output}")

    if save_matrix:
        matrix_output = os.path.join(output_dir, f"{prefix}_matrix.npz")
        cmap.save(matrix_output)
        print(f"Matrix: {matrix_output}")

    if png:
        try:
            from .graphics import save_contact_map_png
            png_output = os.path.join(output_dir, f"{prefix}_contact_map.png")
            save_contact_map_png(
                cmap.matrix, png_output,
                title=f"{mol1.name} vs {mol2.name}",
                label1=mol1.name, label2=mol2.name,
            )
            print(f"Figure: {png_output}")
        except ImportError:
            print("Warning: matplotlib not available, --png disabled")

    print(f"Time elapsed: {time.time() - start_time:.2f} seconds")
    return cmap


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    config = get_config()
    parser = argparse.ArgumentParser(
        description='Residue-residue contacts between two macromolecules (closest-atom method)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  contactmap receptor.pdb ligand.pdb
  contactmap receptor.pdb ligand.pdb --radius 4.5 --output_dir ./results
  contactmap complex.pdb complex.pdb --chain1 A --chain2 B --png
  contactmap a.pdb b.pdb --radius -1 --save_matrix
        """
    )

    parser.add_argument('mol1', help='PDB file of the first molecule')
    parser.add_argument('mol2', help='PDB file of the second molecule')
    parser.add_argument('--radius', type=str, default=None,
                        help=f'Distance threshold in Angstroms, -1 for raw distances '
                             f'(default: {config.radius})')
    parser.add_argument('--chain1', type=str, default=None,
                        help='Only use this chain of the first structure')
    parser.add_argument('--chain2', type=str, default=None,
                        help='Only use this chain of the second structure')
    parser.add_argument('--output_dir', type=str, default=None,
                        help='Output directory (default: directory of the first structure)')
    parser.add_argument('--prefix', type=str, default=None,
                        help='Output file prefix (default: <mol1>_<mol2>)')
    parser.add_argument('--save_matrix', action='store_true',
                        help='Also save the matrix as a .npz file')
    parser.add_argument('--png', action='store_true',
                        help='Also save a contact map figure')
    parser.add_argument('--chunk_size', type=int, default=None,
                        help=f'Residues per distance block (default: {config.chunk_size})')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration CSV file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose)

    try:
        if args.config:
            set_config(load_config_from_csv(args.config))
            print(f"Loaded config: {args.config}")

        radius = args.radius if args.radius is not None else get_config().radius

        for path in (args.mol1, args.mol2):
            if not Path(path).is_file():
                print(f"Error: {path} is not a file")
                return 1

        print("contactmap")
        print("==========")
        print(f"Radius: {radius}")
        run(
            args.mol1,
            args.mol2,
            radius,
            output_dir=args.output_dir,
            prefix=args.prefix,
            chain1=args.chain1,
            chain2=args.chain2,
            save_matrix=args.save_matrix,
            png=args.png,
            chunk_size=args.chunk_size,
        )
    except (ContactMapError, ReaderError) as e:
        logger.debug("Contact map failed", exc_info=True)
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
