"""Tests for configuration CSV handling and the command line."""

import csv
import io
import logging

import pytest

from contactmap.cli import main
from contactmap.config import (
    ContactMapConfig,
    create_default_config_csv,
    get_config,
    load_config_from_csv,
    save_config_to_csv,
)
from contactmap.core import DistanceContactMap
from contactmap.errors import ValidationError
from contactmap.logging_config import LOGGER_PREFIX, get_logger, setup_logging


class TestConfig:
    """Tests for configuration loading and saving."""

    def test_defaults(self):
        config = get_config()

        assert config.radius == 6.0
        assert config.max_atoms == 14

    def test_csv_round_trip(self, tmp_path):
        config = ContactMapConfig(radius=4.5, chunk_size=8, contact_cmap="Blues", dpi=300)
        path = tmp_path / "config.csv"

        save_config_to_csv(config, str(path))
        loaded = load_config_from_csv(str(path))

        assert loaded == config

    def test_default_csv_loads_defaults(self, tmp_path):
        path = tmp_path / "default.csv"

        create_default_config_csv(str(path))

        assert load_config_from_csv(str(path)) == ContactMapConfig()

    def test_unknown_setting_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("setting,value\ncolour,red\n")

        with pytest.raises(ValidationError, match="Unknown setting"):
            load_config_from_csv(str(path))

    def test_bad_value_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("setting,value\nchunk_size,many\n")

        with pytest.raises(ValidationError, match="chunk_size"):
            load_config_from_csv(str(path))

    def test_non_positive_chunk_size_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("setting,value\nchunk_size,0\n")

        with pytest.raises(ValidationError):
            load_config_from_csv(str(path))

    def test_contact_map_uses_config_defaults(self):
        from contactmap.config import set_config

        set_config(ContactMapConfig(chunk_size=3, max_atoms=5))
        cmap = DistanceContactMap()

        assert cmap.chunk_size == 3
        assert cmap.max_atoms == 5


class TestCLI:
    """End-to-end tests for the command line."""

    def test_writes_contacts_csv(self, tmp_path, pdb_files, capsys):
        path_a, path_b = pdb_files
        out_dir = tmp_path / "out"

        code = main([str(path_a), str(path_b), "--output_dir", str(out_dir), "--save_matrix"])

        assert code == 0
        contacts = out_dir / "chainA_chainB_contacts.csv"
        with open(contacts, newline='') as f:
            rows = list(csv.DictReader(f))
        assert [(r['resnum_1'], r['resnum_2']) for r in rows] == [('1', '5')]

        loaded = DistanceContactMap.load(out_dir / "chainA_chainB_matrix.npz")
        assert loaded.radius == 6.0
        assert "Contacts found: 1" in capsys.readouterr().out

    def test_raw_distances(self, tmp_path, pdb_files):
        path_a, path_b = pdb_files

        code = main([str(path_a), str(path_b), "--radius", "-1",
                     "--output_dir", str(tmp_path), "--prefix", "raw"])

        assert code == 0
        with open(tmp_path / "raw_distances.csv", newline='') as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 4

    def test_chain_selection(self, tmp_path, pdb_text_a, pdb_text_b):
        complex_pdb = tmp_path / "complex.pdb"
        complex_pdb.write_text(pdb_text_a + pdb_text_b)

        code = main([str(complex_pdb), str(complex_pdb), "--chain1", "A", "--chain2", "B",
                     "--radius", "6"])

        assert code == 0
        assert (tmp_path / "complex_A_complex_B_contacts.csv").exists()

    def test_invalid_radius_exits_with_error(self, pdb_files, capsys):
        path_a, path_b = pdb_files

        code = main([str(path_a), str(path_b), "--radius", "abc"])

        assert code == 1
        assert "Distance threshold is not a number" in capsys.readouterr().out

    def test_missing_file_exits_with_error(self, tmp_path, pdb_files):
        path_a, _ = pdb_files

        assert main([str(path_a), str(tmp_path / "missing.pdb")]) == 1

    def test_config_file(self, tmp_path, pdb_files):
        path_a, path_b = pdb_files
        config_path = tmp_path / "config.csv"
        save_config_to_csv(ContactMapConfig(radius=2.0), str(config_path))

        code = main([str(path_a), str(path_b), "--config", str(config_path),
                     "--output_dir", str(tmp_path / "cfg")])

        assert code == 0
        contacts = (tmp_path / "cfg" / "chainA_chainB_contacts.csv").read_text()
        assert len(contacts.strip().splitlines()) == 1

    @pytest.mark.parametrize("chunk_size", ["0", "-4"])
    def test_invalid_chunk_size_exits_with_error(self, tmp_path, pdb_files, capsys, chunk_size):
        path_a, path_b = pdb_files

        code = main([str(path_a), str(path_b), "--chunk_size", chunk_size,
                     "--output_dir", str(tmp_path)])

        assert code == 1
        assert "Error: chunk_size must be positive" in capsys.readouterr().out


class TestLogging:
    """Tests for setup_logging()."""

    def test_reconfiguring_closes_previous_handlers(self, tmp_path):
        setup_logging(log_file=tmp_path / "first.log")
        logger = logging.getLogger(LOGGER_PREFIX)
        file_handler = next(h for h in logger.handlers if isinstance(h, logging.FileHandler))

        setup_logging(stream=io.StringIO())

        assert file_handler not in logger.handlers
        assert file_handler.stream is None
        assert len(logger.handlers) == 1

    def test_verbose_writes_debug_to_stream(self):
        stream = io.StringIO()

        setup_logging(verbose=True, stream=stream)
        get_logger("contactmap.core").debug("tensor built")

        assert "tensor built" in stream.getvalue()
