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

from ebsdhough._util.exceptions import InvalidInputError
from ebsdhough.geometry import Camera


class TestCamera:
    def test_init(self):
        camera = Camera(10, -5, 200)
        assert camera.pattern_center_h == 10
        assert camera.pattern_center_v == -5
        assert camera.detector_distance == 200
        assert np.allclose(camera.position, [10, -200, -5])

    def test_init_default(self):
        camera = Camera()
        assert np.allclose(camera.position, [0, -1, 0])

    def test_repr(self):
        assert repr(Camera(10, -5, 200)) == "Camera (10.0, -5.0, 200.0) px"

    def test_position_is_a_copy(self):
        camera = Camera(10, -5, 200)
        position = camera.position
        position[0] = 0
        assert camera.pattern_center_h == 10

    @pytest.mark.parametrize(
        "pc_h, pc_v, dd, match",
        [
            (np.nan, 0, 1, "PC_h"),
            (0, np.inf, 1, "PC_v"),
            (0, 0, np.nan, "Detector distance"),
            (0, 0, 0, "Detector distance \\(0\\) must be > 0"),
            (0, 0, -10, "must be > 0"),
        ],
    )
    def test_init_raises(self, pc_h, pc_v, dd, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = Camera(pc_h, pc_v, dd)

    def test_from_bruker_pc(self):
        camera = Camera.from_bruker_pc([0.4, 0.2, 0.5], (60, 80))
        assert np.isclose(camera.pattern_center_h, -8)
        assert np.isclose(camera.pattern_center_v, 18)
        assert np.isclose(camera.detector_distance, 30)

    def test_from_bruker_pc_center(self):
        camera = Camera.from_bruker_pc([0.5, 0.5, 0.7], (60, 60))
        assert np.allclose(camera.position, [0, -42, 0])

    def test_bruker_pc_round_trip(self):
        pc = np.array([0.421, 0.779, 0.505])
        shape = (60, 80)
        camera = Camera.from_bruker_pc(pc, shape)
        assert np.allclose(camera.to_bruker_pc(shape), pc)

    @pytest.mark.parametrize(
        "pc, shape, match",
        [
            ([0.5, 0.5], (60, 60), "PC must have three values"),
            ([0.5, 0.5, 0.5], (0, 60), "Detector shape"),
        ],
    )
    def test_from_bruker_pc_raises(self, pc, shape, match):
        with pytest.raises(InvalidInputError, match=match):
            _ = Camera.from_bruker_pc(pc, shape)

    def test_to_bruker_pc_raises(self):
        with pytest.raises(InvalidInputError, match="Detector shape"):
            _ = Camera().to_bruker_pc((60, -1))
