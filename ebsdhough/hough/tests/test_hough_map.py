# Copyright 2019-2023 The ebsdhough developers
#
# This file is part of ebsdhough.
#
# ebsdhough is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# ebsdhough is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with ebsdhough. If not, see <http://www.gnu.org/licenses/>.

import numpy as np
import pytest

from ebsdhough._util.exceptions import InvalidInputError, OutOfRangeError
from ebsdhough.hough import HoughMap, HoughPeak, calculate_height, calculate_width


@pytest.fixture
def hough_map() -> HoughMap:
    """Empty map of shape (21, 157) spanning rho in [-10, 10]."""
    return HoughMap.from_resolution(0.02, 1, 10)


class TestCalculateSize:
    @pytest.mark.parametrize(
        "delta_theta, width",
        [(0.02, 157), (np.pi / 4, 3), (np.pi / 2, 1), (np.deg2rad(0.7), 257)],
    )
    def test_calculate_width(self, delta_theta, width):
        assert calculate_width(delta_theta) == width

    @pytest.mark.parametrize(
        "delta_theta, match",
        [
            (0, "delta_theta"),
            (-0.1, "delta_theta"),
            (np.nan, "delta_theta"),
            (np.pi, "too large"),
        ],
    )
    def test_calculate_width_raises(self, delta_theta, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = calculate_width(delta_theta)

    @pytest.mark.parametrize(
        "rho_max, delta_rho, height",
        [(10, 1, 21), (10, 3, 9), (10.5, 1, 23), (1, 1, 3)],
    )
    def test_calculate_height(self, rho_max, delta_rho, height):
        assert calculate_height(rho_max, delta_rho) == height
        assert height % 2 == 1

    @pytest.mark.parametrize(
        "rho_max, delta_rho, match",
        [
            (0, 1, "rho_max"),
            (10, -1, "delta_rho"),
            (10, np.inf, "delta_rho"),
            (1, 2, "must be lower than rho_max"),
        ],
    )
    def test_calculate_height_raises(self, rho_max, delta_rho, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = calculate_height(rho_max, delta_rho)


class TestHoughMap:
    def test_init(self):
        hough_map = HoughMap(4, 5, 0.5, 2)
        assert hough_map.shape == (5, 4)
        assert hough_map.size == 20
        assert hough_map.data.dtype == np.uint8
        assert np.all(hough_map.data == 0)
        assert hough_map.rho_units == "px"
        assert hough_map.properties == {}
        assert not hough_map.changed

    def test_init_with_data(self):
        data = np.arange(15).reshape((3, 5))
        hough_map = HoughMap(5, 3, 0.5, 2, data=data, rho_units="mm")
        assert hough_map.data.dtype == np.uint8
        assert np.allclose(hough_map.data, data)
        assert hough_map.rho_units == "mm"

    @pytest.mark.parametrize(
        "width, height, data, match",
        [
            (4, 4, None, "height \\(4\\) must be odd"),
            (0, 5, None, "width"),
            (2.5, 5, None, "width"),
            (4, -1, None, "height"),
            (4, 5, np.zeros((4, 5)), "Data shape"),
            (4, 5, np.full((5, 4), 300), "within \\[0, 255\\]"),
            (4, 5, np.full((5, 4), -1), "within \\[0, 255\\]"),
        ],
    )
    def test_init_raises(self, width, height, data, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = HoughMap(width, height, 0.5, 2, data=data)

    def test_set_data_out_of_range_raises(self):
        hough_map = HoughMap(4, 5, 0.5, 2)
        data = np.zeros((5, 4), dtype=np.int64)
        data[2, 1] = 300
        with pytest.raises(InvalidInputError, match="\\(0, 300\\)"):
            hough_map.data = data
        assert np.all(hough_map.data == 0)

        data[2, 1] = 255
        hough_map.data = data
        assert hough_map.data[2, 1] == 255

    def test_from_resolution(self, hough_map):
        assert hough_map.shape == (21, 157)
        assert hough_map.delta_theta == 0.02
        assert hough_map.delta_rho == 1
        assert hough_map.rho_max == 10
        assert hough_map.rho_min == -10
        assert hough_map.theta_min == 0
        assert np.isclose(hough_map.theta_max, 0.02 * 156)

    def test_repr(self, hough_map):
        assert repr(hough_map) == (
            "HoughMap (21, 157), delta_theta 1.1 deg, delta_rho 1.0 px"
        )

    def test_axes(self, hough_map):
        assert np.allclose(hough_map.thetas, np.arange(157) * 0.02)
        assert np.allclose(hough_map.rhos, np.arange(10, -11, -1))

    def test_set_calibration(self, hough_map):
        hough_map.data[0, 0] = 10
        hough_map.set_calibration(0.01, 0.5)
        assert hough_map.shape == (21, 157)
        assert hough_map.rho_max == 5
        assert hough_map.rho_min == -5
        assert np.isclose(hough_map.theta_max, 1.56)
        assert hough_map.data[0, 0] == 10

        with pytest.raises(InvalidInputError, match="delta_rho"):
            hough_map.set_calibration(0.01, 0)

    @pytest.mark.parametrize(
        "rho, y",
        [
            (0, 10),
            (10, 0),
            (-10, 20),
            (0.4, 10),
            (0.5, 9),
            (-0.4, 10),
            (-0.5, 11),
            (3.7, 6),
            (-3.7, 14),
            (10.4, 0),
            (-10.4, 20),
        ],
    )
    def test_y_index(self, hough_map, rho, y):
        assert hough_map.y_index(rho) == y

    @pytest.mark.parametrize("rho", [10.6, -10.6, 10.5, -10.5, 100])
    def test_y_index_raises(self, hough_map, rho):
        with pytest.raises(OutOfRangeError, match="Rho"):
            _ = hough_map.y_index(rho)

    @pytest.mark.parametrize(
        "theta, x",
        [(0, 0), (0.0099, 0), (0.01, 1), (0.5, 25), (0.02 * 156, 156), (3.125, 156)],
    )
    def test_x_index(self, hough_map, theta, x):
        assert hough_map.x_index(theta) == x

    @pytest.mark.parametrize("theta", [-0.011, 3.2, np.pi])
    def test_x_index_raises(self, hough_map, theta):
        with pytest.raises(OutOfRangeError, match="Theta"):
            _ = hough_map.x_index(theta)

    def test_index(self, hough_map):
        assert hough_map.index(0, 10) == 0
        assert hough_map.index(0.04, 0) == 10 * 157 + 2
        assert hough_map.index(0.02 * 156, -10) == hough_map.size - 1

    def test_theta_rho(self, hough_map):
        assert hough_map.theta(0) == 0
        assert hough_map.rho(0) == 10

        index = 10 * 157 + 2
        assert np.isclose(hough_map.theta(index), 0.04)
        assert hough_map.rho(index) == 0

        last = hough_map.size - 1
        assert np.isclose(hough_map.theta(last), 3.12)
        assert hough_map.rho(last) == -10

    @pytest.mark.parametrize("index", [-1, 21 * 157])
    def test_theta_rho_raises(self, hough_map, index):
        with pytest.raises(InvalidInputError, match="Index"):
            _ = hough_map.theta(index)
        with pytest.raises(InvalidInputError, match="Index"):
            _ = hough_map.rho(index)

    def test_theta_rho_beyond_pi(self):
        hough_map = HoughMap(200, 21, 0.02, 1)
        assert np.isclose(hough_map.theta(170), 3.4 - np.pi)
        assert hough_map.rho(170) == -10
        assert hough_map.rho(20 * 200 + 170) == 10
        assert hough_map.rho(20 * 200 + 100) == -10

    def test_copy(self, hough_map):
        hough_map.properties["mask_radius"] = 5
        hough_map2 = hough_map.copy()
        hough_map2.data[0, 0] = 100
        hough_map2.properties["mask_radius"] = 6
        hough_map2.set_calibration(0.01, 0.5)

        assert hough_map.data[0, 0] == 0
        assert hough_map.properties["mask_radius"] == 5
        assert hough_map.delta_rho == 1

    def test_crop(self, hough_map):
        hough_map.data[:] = np.arange(21)[:, np.newaxis]
        hough_map.properties["name"] = "pattern"
        cropped = hough_map.crop(5)

        assert cropped.shape == (11, 157)
        assert cropped.rho_max == 5
        assert cropped.delta_rho == hough_map.delta_rho
        assert cropped.delta_theta == hough_map.delta_theta
        assert np.allclose(cropped.data[:, 0], np.arange(5, 16))
        assert cropped.properties == {"name": "pattern"}

    def test_crop_rounds_to_grid(self, hough_map):
        cropped = hough_map.crop(4.6)
        assert cropped.shape == (11, 157)
        assert cropped.rho_max == 5

    @pytest.mark.parametrize(
        "rho, match", [(0, "must be > 0"), (-1, "must be > 0"), (11, "rho_max")]
    )
    def test_crop_raises(self, hough_map, rho, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = hough_map.crop(rho)

    def test_difference(self, hough_map):
        hough_map2 = hough_map.copy()
        hough_map.data[0, 0] = 10
        hough_map2.data[0, 0] = 30
        hough_map2.data[1, 1] = 255

        diff = hough_map.difference(hough_map2)
        assert diff.data[0, 0] == 20
        assert diff.data[1, 1] == 255
        assert diff.data.sum() == 275
        assert np.allclose(diff.data, hough_map2.difference(hough_map).data)

    def test_difference_raises(self, hough_map):
        other = HoughMap.from_resolution(0.02, 1, 9)
        with pytest.raises(InvalidInputError, match="Map shapes"):
            _ = hough_map.difference(other)

        other = hough_map.copy()
        other.set_calibration(0.02, 2)
        with pytest.raises(InvalidInputError, match="Map calibrations"):
            _ = hough_map.difference(other)

        other = HoughMap.from_resolution(0.02, 1, 10, rho_units="mm")
        with pytest.raises(InvalidInputError, match="distance units"):
            _ = hough_map.difference(other)

    def test_is_aligned(self, hough_map):
        assert hough_map.is_aligned(hough_map.copy())
        assert not hough_map.is_aligned(HoughMap.from_resolution(0.01, 1, 10))

    def test_find_peaks(self, hough_map):
        hough_map.data[5, 20] = 200
        hough_map.data[15, 100] = 100

        peaks = hough_map.find_peaks()
        assert len(peaks) == 2
        assert peaks[0].allclose(HoughPeak(0.4, 5, 200))
        assert peaks[1].allclose(HoughPeak(2, -5, 100))

        assert len(hough_map.find_peaks(n_peaks=1)) == 1
        assert len(hough_map.find_peaks(threshold=150)) == 1

    def test_find_peaks_empty_map(self, hough_map):
        assert hough_map.find_peaks() == []
