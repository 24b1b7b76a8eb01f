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

from ebsdhough._util.exceptions import DegenerateValueError, InvalidInputError
from ebsdhough.hough import HoughPeak


class TestHoughPeak:
    def test_init(self):
        peak = HoughPeak(0.5, -10, 200)
        assert peak.theta == 0.5
        assert peak.rho == -10
        assert peak.intensity == 200
        assert peak.rho_units == "px"

    def test_default_intensity(self):
        assert HoughPeak(0.5, 1).intensity == 0

    @pytest.mark.parametrize("k", [-3, -2, -1, 0, 1, 2, 5])
    def test_theta_folding(self, k):
        theta0 = 0.7
        rho0 = 12.5
        peak = HoughPeak(theta0 + k * np.pi, rho0)
        assert np.isclose(peak.theta, theta0)
        assert np.isclose(peak.rho, rho0 * (-1) ** k)
        assert 0 <= peak.theta < np.pi

    def test_theta_pi(self):
        peak = HoughPeak(np.pi, 3)
        assert peak.theta == 0
        assert peak.rho == -3

    @pytest.mark.parametrize(
        "theta, rho, intensity, match",
        [
            (np.nan, 1, 0, "Theta cannot be nan"),
            (0.5, np.inf, 0, "Rho cannot be inf"),
            (0.5, 1, -np.inf, "Intensity cannot be -inf"),
        ],
    )
    def test_init_raises(self, theta, rho, intensity, match):
        with pytest.raises(DegenerateValueError, match=match):
            _ = HoughPeak(theta, rho, intensity)

    def test_repr(self):
        peak = HoughPeak(np.pi + 0.5, 10, 200)
        assert repr(peak) == "HoughPeak (28.65 deg, -10.0 px): 200.0"

    def test_equality_and_hash(self):
        peak1 = HoughPeak(0.5, 1, 2)
        peak2 = HoughPeak(0.5, 1.0, 2.0)
        peak3 = HoughPeak(0.5, 1, 3)
        assert peak1 == peak2
        assert hash(peak1) == hash(peak2)
        assert peak1 != peak3
        assert len({peak1, peak2, peak3}) == 2
        assert peak1 != (0.5, 1, 2)

    def test_equivalent(self):
        peak1 = HoughPeak(0.5, 1, 2)
        peak2 = HoughPeak(0.52, 1.5, 100)
        assert peak1.equivalent(peak2, 0.5, 0.02 + 1e-12)
        assert not peak1.equivalent(peak2, 0.4, 0.1)
        assert not peak1.equivalent(peak2, 1, 0.01)

    def test_equivalent_raises(self):
        peak = HoughPeak(0.5, 1)
        with pytest.raises(InvalidInputError, match="precision in rho"):
            peak.equivalent(peak, -1, 0.1)
        with pytest.raises(InvalidInputError, match="precision in theta"):
            peak.equivalent(peak, 1, np.nan)

    def test_allclose(self):
        peak1 = HoughPeak(0.5, 1, 2)
        assert peak1.allclose(HoughPeak(0.5 + 1e-10, 1, 2))
        assert not peak1.allclose(HoughPeak(0.5, 1, 2.1))
        assert peak1.allclose(HoughPeak(0.5, 1, 2.1), atol=0.2)
        with pytest.raises(InvalidInputError, match="Tolerance"):
            peak1.allclose(peak1, atol=-1)

    def test_immutable(self):
        peak = HoughPeak(0.5, 1)
        with pytest.raises(AttributeError):
            peak.theta = 1
        with pytest.raises(AttributeError):
            peak.other = 1
