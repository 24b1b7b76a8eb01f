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

"""Discretized Hough space with its calibration."""

import copy
from typing import List, Optional, Union

import numpy as np
from skimage.feature import peak_local_max

from ebsdhough._util.exceptions import InvalidInputError, OutOfRangeError
from ebsdhough.constants import DEFAULT_RHO_UNITS
from ebsdhough.hough.hough_peak import HoughPeak


def calculate_width(delta_theta: float) -> int:
    r"""Return the number of columns of a Hough map with an angular
    resolution ``delta_theta``.

    The angle axis runs from 0 to :math:`\pi` (exclusive). The width is
    :math:`\lfloor \pi / \Delta\theta \rfloor`, decreased by one if the
    ratio is an integer.

    Parameters
    ----------
    delta_theta
        Angle increment in radians, i.e. the width of a pixel.

    Returns
    -------
    width
        Number of columns.

    Raises
    ------
    InvalidInputError
        If ``delta_theta`` is not a positive number.
    """
    if not np.isfinite(delta_theta) or delta_theta <= 0:
        raise InvalidInputError(f"delta_theta ({delta_theta}) must be > 0")
    ratio = np.pi / delta_theta
    width = int(np.floor(ratio))
    if ratio == width:
        width -= 1
    if width < 1:
        raise InvalidInputError(
            f"delta_theta ({delta_theta}) is too large to give a single column"
        )
    return width


def calculate_height(rho_max: float, delta_rho: float) -> int:
    """Return the number of rows of a Hough map with a distance range
    ``[-rho_max, rho_max]`` and a distance resolution ``delta_rho``.

    The height is always odd so that the middle row is at ``rho = 0``.

    Parameters
    ----------
    rho_max
        Largest distance.
    delta_rho
        Distance increment, i.e. the height of a pixel.

    Returns
    -------
    height
        Number of rows.

    Raises
    ------
    InvalidInputError
        If ``rho_max`` or ``delta_rho`` is not a positive number, or if
        ``delta_rho`` is greater than ``rho_max``.
    """
    if not np.isfinite(rho_max) or rho_max <= 0:
        raise InvalidInputError(f"rho_max ({rho_max}) must be > 0")
    if not np.isfinite(delta_rho) or delta_rho <= 0:
        raise InvalidInputError(f"delta_rho ({delta_rho}) must be > 0")
    if delta_rho > rho_max:
        raise InvalidInputError(
            f"delta_rho ({delta_rho}) must be lower than rho_max ({rho_max})"
        )
    return 2 * int(np.ceil(rho_max / delta_rho)) + 1


class HoughMap:
    r"""Map of a Hough transform.

    The horizontal direction is the angle theta in radians, running
    from 0 at the left (column 0) to :math:`\pi` (exclusive) at the
    right. The vertical direction is the distance rho, running from
    ``rho_max`` at the top (row 0) to ``rho_min = -rho_max`` at the
    bottom. The map always has an odd number of rows, so that the
    middle row is the distance origin.

    Parameters
    ----------
    width
        Number of columns.
    height
        Number of rows. Must be odd.
    delta_theta
        Angle increment in radians, i.e. the width of a pixel.
    delta_rho
        Distance increment, i.e. the height of a pixel.
    data
        Intensities of shape (height, width). If not given, the map is
        filled with zeros. Cast to 8-bit unsigned integers.
    rho_units
        Units of the distance axis. Default is ``"px"``.
    properties
        Metadata of the map, e.g. copied from the transformed pattern.

    See Also
    --------
    HoughMap.from_resolution, ebsdhough.hough.HoughTransform
    """

    def __init__(
        self,
        width: int,
        height: int,
        delta_theta: float,
        delta_rho: float,
        data: Optional[np.ndarray] = None,
        rho_units: str = DEFAULT_RHO_UNITS,
        properties: Optional[dict] = None,
    ):
        if int(width) != width or width < 1:
            raise InvalidInputError(f"width ({width}) must be a positive integer")
        if int(height) != height or height < 1:
            raise InvalidInputError(f"height ({height}) must be a positive integer")
        if height % 2 == 0:
            raise InvalidInputError(f"height ({height}) must be odd")
        self._width = int(width)
        self._height = int(height)

        if data is None:
            data = np.zeros((self._height, self._width), dtype=np.uint8)
        self.data = data

        self.rho_units = rho_units
        if properties is None:
            properties = {}
        self.properties = dict(properties)
        self.changed = False

        self.set_calibration(delta_theta, delta_rho)

    @classmethod
    def from_resolution(
        cls,
        delta_theta: float,
        delta_rho: float,
        rho_max: float,
        rho_units: str = DEFAULT_RHO_UNITS,
        properties: Optional[dict] = None,
    ) -> "HoughMap":
        """Return an empty Hough map with the given resolutions and
        distance range.

        It might not be possible to get an integer number of rows with
        ``rho_max`` and ``delta_rho``. The resolution is enforced, so
        the distance range of the map is the same as or larger than
        ``rho_max``.

        Parameters
        ----------
        delta_theta
            Angle increment in radians.
        delta_rho
            Distance increment.
        rho_max
            Largest distance to include.
        rho_units
            Units of the distance axis. Default is ``"px"``.
        properties
            Metadata of the map.

        Returns
        -------
        hough_map
            Empty Hough map.

        Examples
        --------
        >>> from ebsdhough.hough import HoughMap
        >>> HoughMap.from_resolution(0.02, 1, 10)
        HoughMap (21, 157), delta_theta 1.1 deg, delta_rho 1.0 px
        """
        return cls(
            width=calculate_width(delta_theta),
            height=calculate_height(rho_max, delta_rho),
            delta_theta=delta_theta,
            delta_rho=delta_rho,
            rho_units=rho_units,
            properties=properties,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__} {self.shape}, "
            f"delta_theta {np.rad2deg(self.delta_theta):.1f} deg, "
            f"delta_rho {self.delta_rho} {self.rho_units}"
        )

    @property
    def data(self) -> np.ndarray:
        """Return or set the map intensities of shape (height, width).

        Parameters
        ----------
        value : numpy.ndarray
            Intensities within [0, 255], cast to ``uint8``.
        """
        return self._data

    @data.setter
    def data(self, value: np.ndarray):
        value = np.asarray(value)
        if value.shape != (self._height, self._width):
            raise InvalidInputError(
                f"Data shape {value.shape} must be equal to the map shape "
                f"{(self._height, self._width)}"
            )
        vmin, vmax = value.min(), value.max()
        if vmin < 0 or vmax > 255:
            raise InvalidInputError(
                f"Data intensities ({vmin}, {vmax}) must be within [0, 255]"
            )
        self._data = value.astype(np.uint8, copy=False)

    @property
    def width(self) -> int:
        """Return the number of theta columns."""
        return self._width

    @property
    def height(self) -> int:
        """Return the number of rho rows."""
        return self._height

    @property
    def shape(self) -> tuple:
        """Return the map shape (height, width)."""
        return self._height, self._width

    @property
    def size(self) -> int:
        """Return the number of pixels."""
        return self._height * self._width

    @property
    def delta_theta(self) -> float:
        """Return the angle increment in radians."""
        return self._delta_theta

    @property
    def delta_rho(self) -> float:
        """Return the distance increment."""
        return self._delta_rho

    @property
    def rho_max(self) -> float:
        """Return the distance of the first row."""
        return self._rho_max

    @property
    def rho_min(self) -> float:
        """Return the distance of the last row."""
        return self._rho_min

    @property
    def theta_min(self) -> float:
        """Return the angle of the first column."""
        return self._theta_min

    @property
    def theta_max(self) -> float:
        """Return the angle of the last column."""
        return self._theta_max

    @property
    def thetas(self) -> np.ndarray:
        """Return the angle of each column."""
        return self.theta_min + np.arange(self.width) * self.delta_theta

    @property
    def rhos(self) -> np.ndarray:
        """Return the distance of each row."""
        return self.rho_max - np.arange(self.height) * self.delta_rho

    def set_calibration(self, delta_theta: float, delta_rho: float):
        """Set the angle and distance increments and recalculate the
        axes limits.

        The intensities are not rescaled.

        Parameters
        ----------
        delta_theta
            Angle increment in radians.
        delta_rho
            Distance increment.

        Raises
        ------
        InvalidInputError
            If any increment is not a positive number.
        """
        for name, value in [("delta_theta", delta_theta), ("delta_rho", delta_rho)]:
            if not np.isfinite(value) or value <= 0:
                raise InvalidInputError(f"{name} ({value}) must be > 0")
        self._delta_theta = float(delta_theta)
        self._delta_rho = float(delta_rho)

        self._rho_max = self._delta_rho * (self.height // 2)
        self._rho_min = -self._rho_max
        self._theta_min = 0.0
        self._theta_max = self._delta_theta * (self.width - 1)

    def x_index(self, theta: float) -> int:
        """Return the column of an angle.

        Parameters
        ----------
        theta
            Angle in radians.

        Returns
        -------
        x
            Column index.

        Raises
        ------
        OutOfRangeError
            If ``theta`` is outside the map.
        """
        half = 0.5 * self.delta_theta
        lower = self.theta_min - half
        upper = self.theta_max + half
        if not lower <= theta <= upper:
            raise OutOfRangeError("Theta", float(theta), lower, upper)
        x = int((theta - self.theta_min) / self.delta_theta + 0.5)
        if x >= self.width:
            raise OutOfRangeError("Theta", float(theta), lower, upper)
        return x

    def y_index(self, rho: float) -> int:
        """Return the row of a distance.

        Rows increase as the distance decreases. Negative distances are
        rounded away from zero, so that the middle row is shared by both
        signs.

        Parameters
        ----------
        rho
            Distance.

        Returns
        -------
        y
            Row index.

        Raises
        ------
        OutOfRangeError
            If ``rho`` is outside the map.
        """
        half = 0.5 * self.delta_rho
        lower = self.rho_min - half
        upper = self.rho_max + half
        if not lower <= rho <= upper:
            raise OutOfRangeError("Rho", float(rho), lower, upper)
        if rho >= 0:
            y = self.height // 2 - int(rho / self.delta_rho + 0.5)
        else:
            y = self.height // 2 - int(rho / self.delta_rho - 0.5)
        if not 0 <= y < self.height:
            raise OutOfRangeError("Rho", float(rho), lower, upper)
        return y

    def index(self, theta: float, rho: float) -> int:
        """Return the linear index ``y * width + x`` of a point.

        Parameters
        ----------
        theta
            Angle in radians.
        rho
            Distance.

        Returns
        -------
        index
            Linear index into the flattened :attr:`data`.

        Raises
        ------
        OutOfRangeError
            If ``theta`` or ``rho`` is outside the map.
        """
        return self.y_index(rho) * self.width + self.x_index(theta)

    def _check_index(self, index: int):
        if not 0 <= index < self.size:
            raise InvalidInputError(
                f"Index ({index}) must be between 0 and {self.size - 1}"
            )

    def theta(self, index: int) -> float:
        r"""Return the angle of a linear index, folded into
        :math:`[0, \pi)`.
        """
        self._check_index(index)
        theta = self.theta_min + (index % self.width) * self.delta_theta
        return float(np.mod(theta, np.pi))

    def rho(self, index: int) -> float:
        r"""Return the distance of a linear index.

        The distance is adjusted so that it corresponds to the angle
        returned by :meth:`theta`, for maps extending beyond
        :math:`\pi`.
        """
        self._check_index(index)
        theta = self.theta_min + (index % self.width) * self.delta_theta
        rho = self.rho_max - (index // self.width) * self.delta_rho
        return float(rho * (-1) ** int(np.floor(theta / np.pi)))

    def copy(self) -> "HoughMap":
        """Return a deep copy of the map."""
        return copy.deepcopy(self)

    def crop(self, rho: float) -> "HoughMap":
        """Return a new map keeping only the rows with a distance
        within ``[-rho, rho]``.

        The distance axis being discrete, ``rho`` is rounded to the
        nearest row, so always read the range of the cropped map from
        :attr:`rho_max`.

        Parameters
        ----------
        rho
            Distance above and below which to crop.

        Returns
        -------
        cropped_map
            Map with the same width, calibration and properties.

        Raises
        ------
        InvalidInputError
            If ``rho`` is not positive or is greater than
            :attr:`rho_max`.
        """
        if not rho > 0:
            raise InvalidInputError(f"rho ({rho}) must be > 0")
        if rho > self.rho_max:
            raise InvalidInputError(
                f"rho ({rho}) must be <= rho_max of the map ({self.rho_max})"
            )
        y_min = self.y_index(rho)
        y_max = self.y_index(-rho)
        return HoughMap(
            width=self.width,
            height=y_max - y_min + 1,
            delta_theta=self.delta_theta,
            delta_rho=self.delta_rho,
            data=self.data[y_min : y_max + 1].copy(),
            rho_units=self.rho_units,
            properties=copy.deepcopy(self.properties),
        )

    def is_aligned(self, other: "HoughMap", raise_if_not: bool = False) -> bool:
        """Return whether another map has the same shape, calibration
        and distance units as this map.

        Parameters
        ----------
        other
            Another Hough map.
        raise_if_not
            Whether to raise an :class:`InvalidInputError` if the maps
            are not aligned. Default is False.

        Returns
        -------
        aligned
            Whether the maps are aligned.
        """
        msg = None
        if self.shape != other.shape:
            msg = f"Map shapes {self.shape} and {other.shape} must be equal"
        elif not np.isclose(self.delta_theta, other.delta_theta) or not np.isclose(
            self.delta_rho, other.delta_rho
        ):
            msg = (
                f"Map calibrations ({self.delta_theta}, {self.delta_rho}) and "
                f"({other.delta_theta}, {other.delta_rho}) must be equal"
            )
        elif self.rho_units != other.rho_units:
            msg = (
                f"Map distance units {self.rho_units!r} and {other.rho_units!r} "
                "must be equal"
            )

        if raise_if_not and msg is not None:
            raise InvalidInputError(msg)
        return msg is None

    def difference(self, other: "HoughMap") -> "HoughMap":
        """Return the absolute intensity difference between this map
        and another aligned map.

        Raises
        ------
        InvalidInputError
            If the maps are not aligned.
        """
        self.is_aligned(other, raise_if_not=True)
        diff = np.abs(self.data.astype(np.int16) - other.data.astype(np.int16))
        return HoughMap(
            width=self.width,
            height=self.height,
            delta_theta=self.delta_theta,
            delta_rho=self.delta_rho,
            data=diff,
            rho_units=self.rho_units,
            properties=copy.deepcopy(self.properties),
        )

    def find_peaks(
        self,
        n_peaks: Optional[int] = None,
        min_distance: int = 1,
        threshold: Union[None, int, float] = None,
    ) -> List[HoughPeak]:
        """Return the brightest local maxima of the map as Hough peaks.

        Parameters
        ----------
        n_peaks
            Maximum number of peaks to return. If not given, all local
            maxima are returned.
        min_distance
            Minimum number of pixels separating two peaks. Default is 1.
        threshold
            Minimum intensity of a peak. If not given, the map minimum
            is used.

        Returns
        -------
        peaks
            Peaks sorted by intensity in decreasing order.

        Notes
        -----
        Uses :func:`skimage.feature.peak_local_max`.
        """
        if n_peaks is None:
            n_peaks = np.inf
        coordinates = peak_local_max(
            self.data,
            min_distance=min_distance,
            threshold_abs=threshold,
            num_peaks=n_peaks,
            exclude_border=False,
        )
        peaks = []
        for row, col in coordinates:
            index = int(row) * self.width + int(col)
            peaks.append(
                HoughPeak(
                    self.theta(index),
                    self.rho(index),
                    intensity=self.data[row, col],
                    rho_units=self.rho_units,
                )
            )
        return peaks
