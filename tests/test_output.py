"""Tests for CSV output, matrix persistence and contact map figures."""

import csv

import numpy as np
import pytest

from contactmap.core import DistanceContactMap
from contactmap.errors import PreconditionError, ValidationError
from contactmap.output_writers import (
    CONTACT_FIELDS,
    load_matrix,
    save_matrix,
    write_contacts_csv,
    write_distance_csv,
)


def read_csv(path):
    with open(path, newline='') as f:
        return list(csv.DictReader(f))


class TestMatrixPersistence:
    """Tests for saving and loading matrices."""

    def test_contact_map_round_trip(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        path = tmp_path / "cmap.npz"

        cmap.save(path)
        loaded = DistanceContactMap.load(path)

        assert loaded.radius == cmap.radius
        assert loaded.matrix.dtype == bool
        np.testing.assert_array_equal(loaded.matrix, cmap.matrix)
        assert loaded.structures is None

    def test_distance_round_trip_keeps_missing(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=-1)
        path = tmp_path / "distances.npz"

        cmap.save(path)
        loaded = DistanceContactMap.load(path)

        assert loaded.radius == -1.0
        np.testing.assert_array_equal(np.isnan(loaded.matrix), np.isnan(cmap.matrix))
        np.testing.assert_allclose(loaded.matrix, cmap.matrix, equal_nan=True)

    def test_loaded_map_materializes_with_structures(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        path = tmp_path / "cmap.npz"
        cmap.save(path)

        loaded = DistanceContactMap.load(path)
        with pytest.raises(PreconditionError):
            loaded.contacts

        loaded.structures = [pdb_text_a, pdb_text_b]
        assert len(loaded.contacts) == 1

    def test_load_with_structures(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        path = tmp_path / "cmap.npz"
        cmap.save(path)

        loaded = DistanceContactMap.load(path, structures=[pdb_text_a, pdb_text_b])

        assert loaded.contact_pairs() == [(1, 5)]
        assert len(loaded.contacts) == 1

    def test_loaded_matrix_rejects_mismatched_structures(self, tmp_path, pdb_text_a,
                                                         pdb_text_b, make_molecule):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        path = tmp_path / "cmap.npz"
        cmap.save(path)
        other = [make_molecule("m1", {1: [(0.0, 0.0, 0.0)]}),
                 make_molecule("m2", {2: [(0.0, 0.0, 50.0)]})]

        loaded = DistanceContactMap.load(path)
        with pytest.raises(ValidationError, match="do not match"):
            loaded.structures = other
        with pytest.raises(ValidationError):
            DistanceContactMap.load(path, structures=other)

        assert loaded.structures is None
        assert loaded.matrix.shape == (3, 8)

    def test_save_after_radius_change_keeps_matrix_radius(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        cmap.radius = 2
        path = tmp_path / "cmap.npz"

        cmap.save(path)

        assert DistanceContactMap.load(path).radius == 6.0

    def test_save_before_calculate_raises(self, tmp_path):
        with pytest.raises(PreconditionError):
            DistanceContactMap(radius=6).save(tmp_path / "x.npz")

    def test_path_written_as_given(self, tmp_path):
        path = tmp_path / "matrix.bin"

        save_matrix(path, np.eye(2, dtype=bool), 4.0)
        matrix, radius = load_matrix(path)

        assert path.exists()
        assert radius == 4.0
        np.testing.assert_array_equal(matrix, np.eye(2, dtype=bool))

    def test_foreign_archive_raises(self, tmp_path):
        path = tmp_path / "other.npz"
        np.savez(path, something=np.zeros(3))

        with pytest.raises(ValidationError):
            load_matrix(path)

    def test_plain_npy_file_raises(self, tmp_path):
        path = tmp_path / "matrix.npy"
        np.save(path, np.zeros((2, 2)))

        with pytest.raises(ValidationError):
            load_matrix(path)

    @pytest.mark.parametrize("content", [b"not an archive at all", b"PK\x03\x04broken", b""])
    def test_unreadable_file_raises(self, tmp_path, content):
        path = tmp_path / "broken.npz"
        path.write_bytes(content)

        with pytest.raises(ValidationError):
            DistanceContactMap.load(path)


class TestCSVWriters:
    """Tests for CSV writers."""

    def test_contacts_csv(self, tmp_path, pdb_text_a, pdb_text_b):
        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=6)
        path = tmp_path / "contacts.csv"

        write_contacts_csv(cmap.contacts, cmap.structures, str(path))
        rows = read_csv(path)

        assert list(rows[0].keys()) == CONTACT_FIELDS
        assert len(rows) == 1
        assert rows[0]['chain_1'] == 'A'
        assert rows[0]['resnum_1'] == '1'
        assert rows[0]['resname_2'] == 'SER'
        assert rows[0]['atom_2'] == 'OG'
        assert float(rows[0]['distance']) == pytest.approx(3.0)

    def test_contacts_csv_header_only_without_contacts(self, tmp_path, origin_pair_far):
        cmap = DistanceContactMap()
        cmap.calculate(*origin_pair_far, radius=6)
        path = tmp_path / "contacts.csv"

        write_contacts_csv(cmap.contacts, cmap.structures, str(path))

        assert path.read_text().strip() == ",".join(CONTACT_FIELDS)

    def test_distance_csv_skips_missing(self, tmp_path):
        distances = np.array([[np.nan, 2.5], [7.0, np.nan]])
        path = tmp_path / "distances.csv"

        write_distance_csv(distances, str(path))
        rows = read_csv(path)

        assert [(r['resnum_1'], r['resnum_2'], r['distance']) for r in rows] == [
            ('0', '1', '2.5'), ('1', '0', '7.0')
        ]

    def test_distance_csv_max_distance(self, tmp_path):
        distances = np.array([[1.0, 8.0]])
        path = tmp_path / "distances.csv"

        write_distance_csv(distances, str(path), max_distance=5.0)

        assert len(read_csv(path)) == 1


@pytest.fixture
def origin_pair_far(make_molecule):
    return (
        make_molecule("m1", {1: [(0.0, 0.0, 0.0)]}),
        make_molecule("m2", {2: [(0.0, 0.0, 10.0)]}),
    )


class TestPlotting:
    """Tests for contact map figures."""

    def test_plot_contact_and_distance_maps(self, tmp_path, pdb_text_a, pdb_text_b):
        pytest.importorskip("matplotlib")
        import matplotlib
        matplotlib.use('Agg')
        from contactmap.graphics import plot_contact_map, save_contact_map_png

        cmap = DistanceContactMap()
        cmap.calculate(pdb_text_a, pdb_text_b, radius=-1)

        fig, ax = plot_contact_map(cmap.matrix, title="test")
        assert ax.get_title() == "test"

        cmap.calculate(radius=6)
        path = tmp_path / "map.png"
        save_contact_map_png(cmap.matrix, str(path))
        assert path.stat().st_size > 0
