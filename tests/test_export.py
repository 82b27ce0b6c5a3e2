import logging
import numpy as np
import pytest
from PIL import Image

from probability_map import GridMap, WorldPoint, MapPoint
from probability_map.export import map_metadata, occupancy_bytes
from probability_map.logodds import probability_to_log_odds


# region Points
def test_scenario_e_single_point():
    g = GridMap(5, 5, 1.0)
    g.update(3, 1, 0.9)
    assert g.points(0.6) == [MapPoint(1.0, 3.0)]


def test_points_row_major_and_strict():
    g = GridMap(3, 3, 1.0)
    g.update(2, 0, 0.8)
    g.update(0, 2, 0.8)
    g.update(1, 1, 0.55)
    assert g.points(0.6) == [MapPoint(2.0, 0.0), MapPoint(0.0, 2.0)]
    assert g.points(0.5) == [MapPoint(2.0, 0.0), MapPoint(1.0, 1.0), MapPoint(0.0, 2.0)]
    assert GridMap(3, 3, 1.0).points(0.5) == []
# endregion


# region Occupancy Raster
def test_scenario_d_unknown_map_bytes():
    g = GridMap(3, 4, 0.1)
    occ = g.occupancy_grid()
    assert occ.dtype == np.uint8
    assert occ.shape == (3, 4)
    assert np.all(occ == 127)


def test_occupancy_extremes():
    g = GridMap(1, 3, 1.0)
    g.load([50.0, 0.0, -50.0])
    assert g.occupancy_grid().tolist() == [[0, 127, 255]]


def test_occupancy_bytes_rounding():
    lo = probability_to_log_odds(np.array([0.2, 0.8]))
    assert occupancy_bytes(lo).tolist() == [204, 51]


def test_occupancy_grid_is_independent():
    g = GridMap(2, 2, 1.0)
    occ = g.occupancy_grid()
    occ[:] = 0
    assert np.all(g.occupancy_grid() == 127)


def test_occupancy_image():
    g = GridMap(3, 5, 1.0)
    g.update(0, 4, 0.99)
    img = g.occupancy_image()
    assert img.mode == "L"
    assert img.size == (5, 3)
    assert img.getpixel((4, 0)) < 10
    assert img.getpixel((0, 0)) == 127
# endregion


# region PGM + YAML
def test_write_occupancy_grid(tmp_path):
    g = GridMap(3, 4, 0.05, WorldPoint(-1.5, 2.0))
    # byte value 10 is a newline; it must land in the file untranslated
    g.load([probability_to_log_odds(245.0 / 255.0)] + [0.0] * 11)
    pgm_path, yaml_path = g.write_occupancy_grid(str(tmp_path / "map"))

    assert pgm_path == str(tmp_path / "map.pgm")
    assert yaml_path == str(tmp_path / "map.yaml")

    data = (tmp_path / "map.pgm").read_bytes()
    header = b"P5\n4 3\n255\n"
    assert data[:len(header)] == header
    assert len(data) == len(header) + 12
    assert data[len(header)] == 10
    assert data[len(header):] == g.occupancy_grid().tobytes()

    assert (tmp_path / "map.yaml").read_text() == (
        "image: map.pgm\n"
        "resolution: 0.05\n"
        "origin: [-1.5, 2.0, 0.0]\n"
        "negate: 0\n"
        "occupied_thresh: 0.80\n"
        "free_thresh: 0.20\n"
    )


def test_written_pgm_reads_back(tmp_path):
    g = GridMap(4, 6, 1.0)
    g.update(1, 2, 0.95)
    g.update(3, 5, 0.05)
    g.write_occupancy_grid(tmp_path / "scan")
    with Image.open(tmp_path / "scan.pgm") as img:
        assert img.size == (6, 4)
        np.testing.assert_array_equal(np.asarray(img), g.occupancy_grid())


def test_export_logs_written_files(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="probability_map.export")
    GridMap(2, 2, 1.0).write_occupancy_grid(str(tmp_path / "m"))
    assert "Wrote 2x2 occupancy grid" in caplog.text


def test_export_to_missing_directory_fails(tmp_path):
    with pytest.raises(OSError):
        GridMap(2, 2, 1.0).write_occupancy_grid(str(tmp_path / "nope" / "m"))


def test_metadata_integer_origin():
    assert "origin: [3.0, -4.0, 0.0]\n" in map_metadata("a.pgm", 1, WorldPoint(3, -4))
    assert "resolution: 1.0\n" in map_metadata("a.pgm", 1, WorldPoint(3, -4))
# endregion
