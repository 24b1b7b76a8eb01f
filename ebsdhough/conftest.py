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

from typing import List

from diffpy.structure import Lattice
import numpy as np
from orix.quaternion.symmetry import Oh
import pytest

from ebsdhough._util.rotation import _quaternion_to_matrix
from ebsdhough.geometry import Camera, normal_to_peak
from ebsdhough.hough import HoughPeak
from ebsdhough.indexing import CandidatePhase

# ----------------------------- Fixtures ----------------------------- #


@pytest.fixture
def nickel_lattice() -> Lattice:
    return Lattice(3.52, 3.52, 3.52, 90, 90, 90)


@pytest.fixture
def nickel_phase(nickel_lattice) -> CandidatePhase:
    """Nickel with the {111}, {200} and {220} planes, 13 reflectors in
    total, the {111} planes being the most intense.
    """
    return CandidatePhase.from_hkl(
        "ni",
        [[1, 1, 1], [2, 0, 0], [2, 2, 0]],
        nickel_lattice,
        Oh,
        intensities=[3, 2, 1],
    )


@pytest.fixture
def camera() -> Camera:
    return Camera(5, -3, 120)


@pytest.fixture
def rotation_quaternion() -> np.ndarray:
    q = np.array([0.9, 0.2, -0.3, 0.25])
    return q / np.linalg.norm(q)


@pytest.fixture
def rotation_matrix(rotation_quaternion) -> np.ndarray:
    """Camera to crystal rotation matrix of the synthetic peaks."""
    return _quaternion_to_matrix(rotation_quaternion)


@pytest.fixture
def synthetic_peaks(nickel_phase, camera, rotation_matrix) -> List[HoughPeak]:
    """Hough peaks of all reflectors of nickel in the orientation
    ``rotation_matrix``, with intensities decreasing in the reflector
    order.
    """
    normals = nickel_phase.normals @ rotation_matrix
    return [
        normal_to_peak(normal, camera, intensity=100 - i)
        for i, normal in enumerate(normals)
    ]


@pytest.fixture
def line_pattern() -> np.ndarray:
    """Pattern of shape (21, 31) with a horizontal line through the
    center pixel and a fainter vertical line five pixels to its right.
    """
    pattern = np.zeros((21, 31), dtype=np.uint8)
    pattern[10] = 200
    pattern[:, 20] = 100
    return pattern
