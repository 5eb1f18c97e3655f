"""
Configuration module.

Provides defaults for the contact calculation (distance threshold, atom
slots per residue, chunking) and for contact map figures. Settings can be
loaded from CSV or set programmatically.
"""

from dataclasses import dataclass
import csv

from .errors import ValidationError


@dataclass
class ContactMapConfig:
    """Contact map configuration."""
    # Default distance threshold in Angstroms (closest-atom method).
    # 6 A is the usual compromise between recall and false positives
    # (Fischer et al., J. Struct. Biol. 153:103-112, 2006).
    radius: float = 6.0

    # Atom slots per residue in the coordinate tensor.
    # 14 = heavy atoms of the largest standard amino acid (TRP).
    max_atoms: int = 14

    # Residues of the first molecule processed per distance block.
    # Peak memory per block ~ chunk_size * n_res2 * max_atoms^2 * 3 * 8 bytes
    chunk_size: int = 64

    # Figure settings
    contact_cmap: str = "Greys"
    distance_cmap: str = "viridis_r"
    distance_vmax: float = 20.0
    missing_color: str = "#f0f0f0"
    dpi: int = 150


_SETTING_TYPES = {
    'radius': float,
    'max_atoms': int,
    'chunk_size': int,
    'contact_cmap': str,
    'distance_cmap': str,
    'distance_vmax': float,
    'missing_color': str,
    'dpi': int,
}

# Global default configuration
_default_config = ContactMapConfig()


def get_config() -> ContactMapConfig:
    """Get the current configuration."""
    return _default_config


def set_config(config: ContactMapConfig) -> None:
    """Set the global configuration."""
    global _default_config
    _default_config = config


def load_config_from_csv(csv_path: str) -> ContactMapConfig:
    """
    Load configuration from a CSV file.

    CSV format:
        setting,value
        radius,6.0
        chunk_size,64
        contact_cmap,Greys
        ...

    Rows whose setting starts with '#' are comments.

    Args:
        csv_path: Path to configuration CSV file

    Returns:
        ContactMapConfig instance

    Raises:
        ValidationError: If a setting is unknown or has an invalid value
    """
    config = ContactMapConfig()

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            setting = (row.get('setting') or '').strip()
            value = (row.get('value') or '').strip()

            if not setting or not value or setting.startswith('#'):
                continue

            if setting not in _SETTING_TYPES:
                raise ValidationError(f"Unknown setting '{setting}' in {csv_path}")

            try:
                setattr(config, setting, _SETTING_TYPES[setting](value))
            except ValueError as e:
                raise ValidationError(f"Invalid value for '{setting}': {value!r}") from e

    if config.max_atoms < 1 or config.chunk_size < 1:
        raise ValidationError("max_atoms and chunk_size must be positive")

    return config


def save_config_to_csv(config: ContactMapConfig, csv_path: str) -> None:
    """
    Save configuration to a CSV file.

    Args:
        config: ContactMapConfig instance
        csv_path: Path to save configuration CSV
    """
    settings = [
        ('# Contact Calculation', ''),
        ('# Distance threshold in Angstroms (-1 = report raw distances)', ''),
        ('radius', str(config.radius)),
        ('max_atoms', str(config.max_atoms)),
        ('# Residues per distance block (lower = less memory)', ''),
        ('chunk_size', str(config.chunk_size)),

        ('# Figures', ''),
        ('contact_cmap', config.contact_cmap),
        ('distance_cmap', config.distance_cmap),
        ('distance_vmax', str(config.distance_vmax)),
        ('missing_color', config.missing_color),
        ('dpi', str(config.dpi)),
    ]

    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['setting', 'value'])
        for setting, value in settings:
            writer.writerow([setting, value])


def create_default_config_csv(csv_path: str) -> None:
    """Create a default configuration CSV file."""
    save_config_to_csv(ContactMapConfig(), csv_path)
