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

from ebsdhough._util.exceptions import DegenerateValueError, InvalidInputError
from ebsdhough.constants import DEFAULT_RHO_UNITS


class HoughPeak:
    r"""A peak in Hough space, i.e. a line in the pattern.

    Parameters
    ----------
    theta
        Angle of the line normal in radians. It is folded into
        :math:`[0, \pi)`.
    rho
        Signed distance between the line and the pattern center. Its
        sign is flipped for every half turn removed from ``theta``, so
        that all representations of the same line are equal.
    intensity
        Intensity of the peak. Default is 0.
    rho_units
        Units of ``rho``. Default is ``"px"``.

    Raises
    ------
    DegenerateValueError
        If ``theta``, ``rho`` or ``intensity`` is NaN or infinite.

    Examples
    --------
    >>> import numpy as np
    >>> from ebsdhough.hough import HoughPeak
    >>> HoughPeak(np.pi + 0.5, 10, 200)
    HoughPeak (28.65 deg, -10.0 px): 200.0
    """

    __slots__ = ("_theta", "_rho", "_intensity", "_rho_units")

    def __init__(
        self,
        theta: float,
        rho: float,
        intensity: float = 0.0,
        rho_units: str = DEFAULT_RHO_UNITS,
    ):
        theta = float(theta)
        rho = float(rho)
        intensity = float(intensity)
        for name, value in [("Theta", theta), ("Rho", rho), ("Intensity", intensity)]:
            if not np.isfinite(value):
                raise DegenerateValueError(name, value)

        # Bring theta within [0, pi) and flip rho once per half turn
        k = int(np.floor(theta / np.pi))
        theta -= k * np.pi
        if k % 2:
            rho = -rho
        if theta >= np.pi:
            theta -= np.pi
            rho = -rho
        elif theta < 0:
            theta = 0.0

        self._theta = theta
        self._rho = rho + 0.0  # Avoid negative zero
        self._intensity = intensity
        self._rho_units = str(rho_units)

    def __repr__(self) -> str:
        theta_deg = np.rad2deg(self.theta)
        return (
            f"{type(self).__name__} ({theta_deg:.2f} deg, {self.rho} "
            f"{self.rho_units}): {self.intensity}"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, HoughPeak):
            return NotImplemented
        return (
            self.theta == other.theta
            and self.rho == other.rho
            and self.intensity == other.intensity
            and self.rho_units == other.rho_units
        )

    def __hash__(self) -> int:
        return hash((self.theta, self.rho, self.intensity, self.rho_units))

    @property
    def theta(self) -> float:
        r"""Return the angle in radians, within :math:`[0, \pi)`."""
        return self._theta

    @property
    def rho(self) -> float:
        """Return the signed distance to the pattern center."""
        return self._rho

    @property
    def intensity(self) -> float:
        """Return the peak intensity."""
        return self._intensity

    @property
    def rho_units(self) -> str:
        """Return the units of the distance."""
        return self._rho_units

    def allclose(self, other: "HoughPeak", atol: float = 1e-8) -> bool:
        """Return whether this peak and another have all of theta, rho
        and intensity within an absolute tolerance.
        """
        if atol < 0 or np.isnan(atol):
            raise InvalidInputError(f"Tolerance ({atol}) must be a number >= 0")
        return (
            self.equivalent(other, atol, atol)
            and abs(self.intensity - other.intensity) <= atol
        )

    def equivalent(
        self, other: "HoughPeak", rho_precision: float, theta_precision: float
    ) -> bool:
        """Return whether this peak is at the same position as another,
        ignoring the intensity.

        Parameters
        ----------
        other
            Another peak.
        rho_precision
            Largest allowed difference in rho.
        theta_precision
            Largest allowed difference in theta in radians.

        Returns
        -------
        equivalent
            Whether the two peaks are at the same position.

        Raises
        ------
        InvalidInputError
            If any precision is negative or NaN.
        """
        for name, value in [("rho", rho_precision), ("theta", theta_precision)]:
            if np.isnan(value) or value < 0:
                raise InvalidInputError(
                    f"The precision in {name} ({value}) must be a number >= 0"
                )
        return (
            abs(self.rho - other.rho) <= rho_precision
            and abs(self.theta - other.theta) <= theta_precision
        )
