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

"""Hough transform of EBSD patterns."""

import logging
import threading
from typing import Optional, Tuple

from numba import njit
import numpy as np
from scipy.integrate import dblquad

from ebsdhough._util.exceptions import InvalidInputError, OutOfRangeError
from ebsdhough.constants import (
    BAND_WIDTH_FRACTIONS,
    DEFAULT_RHO_UNITS,
    INTERRUPT_CHECK_INTERVAL,
    MASK_RADIUS_KEY,
    RHO_FRACTIONS,
    UNITS_KEY,
)
from ebsdhough.hough.hough_map import HoughMap

_logger = logging.getLogger(__name__)


def calculate_delta_rho(
    radius: float,
    delta_theta: float,
    band_width_limits: Optional[Tuple[float, float]] = None,
    rho_limits: Optional[Tuple[float, float]] = None,
) -> float:
    r"""Return the distance resolution giving Hough peaks with on
    average the same extent in theta and rho.

    A band of width :math:`b` at a distance :math:`\rho` from the
    center of a circular pattern of radius :math:`R` has a peak with an
    aspect ratio

    .. math::

        \frac{b}{2 \arctan\left(b / \left(2 \sqrt{R^2 - \rho^2}\right)\right)}.

    The ratio is averaged over the band widths and distances by
    adaptive double integration, and multiplied by ``delta_theta``.

    Parameters
    ----------
    radius
        Radius :math:`R` of the pattern (mask) in pixels.
    delta_theta
        Angle increment of the Hough map in radians.
    band_width_limits
        Smallest and largest band width in pixels. If not given,
        1% and 25% of ``radius`` are used.
    rho_limits
        Smallest and largest band distance in pixels. Must be within
        ``(-radius, radius)``. If not given, -90% and 90% of ``radius``
        are used.

    Returns
    -------
    delta_rho
        Distance increment in pixels.

    Raises
    ------
    InvalidInputError
        If ``radius``, ``delta_theta`` or the band widths are not
        positive, or if a pair of limits is reversed.
    """
    if not np.isfinite(radius) or radius <= 0:
        raise InvalidInputError(f"Radius ({radius}) must be > 0")
    if not np.isfinite(delta_theta) or delta_theta <= 0:
        raise InvalidInputError(f"delta_theta ({delta_theta}) must be > 0")

    if band_width_limits is None:
        band_width_limits = tuple(f * radius for f in BAND_WIDTH_FRACTIONS)
    if rho_limits is None:
        rho_limits = tuple(f * radius for f in RHO_FRACTIONS)
    b_min, b_max = map(float, band_width_limits)
    rho_min, rho_max = map(float, rho_limits)

    if b_min <= 0:
        raise InvalidInputError(f"Band widths ({b_min}, {b_max}) must be > 0")
    if b_min >= b_max:
        raise InvalidInputError(
            f"Smallest band width ({b_min}) must be lower than the largest ({b_max})"
        )
    if rho_min >= rho_max:
        raise InvalidInputError(
            f"Smallest distance ({rho_min}) must be lower than the largest ({rho_max})"
        )
    if rho_min <= -radius or rho_max >= radius:
        raise InvalidInputError(
            f"Distances ({rho_min}, {rho_max}) must be within the radius ({radius})"
        )

    def aspect_ratio(b, rho):
        return b / (2 * np.arctan(b / (2 * np.sqrt(radius**2 - rho**2))))

    integral, _ = dblquad(aspect_ratio, rho_min, rho_max, b_min, b_max)
    mean = integral / ((b_max - b_min) * (rho_max - rho_min))

    return float(mean * delta_theta)


@njit(
    (
        "void(int64[:], float64[:], float64[:], float64[:], float64[:], float64, "
        "int64[:, :], int64[:, :], int64, int64)"
    ),
    cache=True,
    nogil=True,
)
def _accumulate(
    values: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    cos_theta: np.ndarray,
    sin_theta: np.ndarray,
    delta_rho: float,
    sums: np.ndarray,
    counts: np.ndarray,
    start: int,
    stop: int,
):
    """Add the votes of pixels ``start`` to ``stop`` (exclusive) to the
    sums and counts of the Hough map cells.
    """
    height = sums.shape[0]
    half = height // 2
    for i in range(start, stop):
        value = values[i]
        if value == 0:
            continue
        x = xs[i]
        y = ys[i]
        for n in range(cos_theta.size):
            r = (x * cos_theta[n] + y * sin_theta[n]) / delta_rho
            if r >= 0:
                row = half - int(r + 0.5)
            else:
                row = half - int(r - 0.5)
            if 0 <= row < height:
                sums[row, n] += value
                counts[row, n] += 1


def _check_pattern(pattern: np.ndarray) -> np.ndarray:
    pattern = np.asarray(pattern)
    if pattern.ndim != 2 or pattern.size == 0:
        raise InvalidInputError(
            f"Pattern must be a non-empty 2D array, not of shape {pattern.shape}"
        )
    if not np.issubdtype(pattern.dtype, np.integer):
        raise InvalidInputError(
            f"Pattern must have an integer data type, not {pattern.dtype}"
        )
    imin, imax = pattern.min(), pattern.max()
    if imin < 0 or imax > 255:
        raise InvalidInputError(
            f"Pattern intensities ({imin}, {imax}) must be within [0, 255]"
        )
    return pattern


class HoughTransform:
    """Interruptible Hough transform of EBSD patterns.

    Each pattern pixel votes, with its intensity, for all lines passing
    through it. A Hough map cell holds the average intensity of the
    pixels voting for it, so that short and long lines compare.

    Parameters
    ----------
    interrupt_event
        Event which, when set, stops a running transform. If not given,
        a new :class:`threading.Event` is created. The event may be set
        from any thread, directly or with :meth:`interrupt`. It is never
        cleared by the transform, so all later transforms stop before
        scanning any pixel until the event is cleared.
    check_interval
        Number of pattern pixels scanned between two checks of the
        event. Default is 10.

    Attributes
    ----------
    progress : float
        Fraction of the pattern pixels scanned by the last transform.
    n_pixels : int
        Number of pattern pixels scanned by the last transform.
    """

    def __init__(
        self,
        interrupt_event: Optional[threading.Event] = None,
        check_interval: int = INTERRUPT_CHECK_INTERVAL,
    ):
        if interrupt_event is None:
            interrupt_event = threading.Event()
        if int(check_interval) != check_interval or check_interval < 1:
            raise InvalidInputError(
                f"Check interval ({check_interval}) must be a positive integer"
            )
        self.interrupt_event = interrupt_event
        self.check_interval = int(check_interval)
        self.progress = 0.0
        self.n_pixels = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__} (check interval {self.check_interval})"

    def interrupt(self):
        """Stop the running transform and all later ones, until the
        interruption event is cleared.
        """
        self.interrupt_event.set()

    @property
    def interrupted(self) -> bool:
        """Return whether the interruption event is set."""
        return self.interrupt_event.is_set()

    def create_hough_map(
        self,
        pattern: np.ndarray,
        delta_theta: float,
        delta_rho: Optional[float] = None,
        properties: Optional[dict] = None,
    ) -> HoughMap:
        """Return an empty Hough map large enough to hold the transform
        of a pattern.

        The distance range covers the pattern diagonal,
        ``rho_max = ceil(sqrt(w^2 + h^2) / 2)``.

        Parameters
        ----------
        pattern
            EBSD pattern of shape (h, w).
        delta_theta
            Angle increment in radians.
        delta_rho
            Distance increment in pixels. If not given, it is calculated
            with :func:`calculate_delta_rho`, using the mask radius in
            ``properties["mask_radius"]`` if present, or else the
            largest circle fitting in the pattern.
        properties
            Pattern metadata copied to the map.

        Returns
        -------
        hough_map
            Empty Hough map.
        """
        pattern = _check_pattern(pattern)
        if properties is None:
            properties = {}
        h, w = pattern.shape

        rho_max = float(np.ceil(np.sqrt(w**2 + h**2) / 2))
        if delta_rho is None:
            radius = properties.get(MASK_RADIUS_KEY, min(w // 2, h // 2))
            delta_rho = calculate_delta_rho(radius, delta_theta)
            _logger.debug(f"Calculated delta rho {delta_rho} from radius {radius}")

        return HoughMap.from_resolution(
            delta_theta,
            delta_rho,
            rho_max,
            rho_units=properties.get(UNITS_KEY, DEFAULT_RHO_UNITS),
            properties=properties,
        )

    def transform(
        self,
        pattern: np.ndarray,
        delta_theta: float,
        delta_rho: Optional[float] = None,
        properties: Optional[dict] = None,
    ) -> HoughMap:
        """Return the Hough transform of a pattern.

        Parameters
        ----------
        pattern
            EBSD pattern of shape (h, w) with integer intensities within
            [0, 255]. Pixels with zero intensity are ignored.
        delta_theta
            Angle increment in radians.
        delta_rho
            Distance increment in pixels. If not given, it is
            calculated as described in :meth:`create_hough_map`.
        properties
            Pattern metadata copied to the map.

        Returns
        -------
        hough_map
            Hough transform, possibly partial if interrupted.

        Examples
        --------
        >>> import numpy as np
        >>> from ebsdhough.hough import HoughTransform
        >>> pattern = np.zeros((21, 21), dtype=np.uint8)
        >>> pattern[10] = 255
        >>> hough_map = HoughTransform().transform(pattern, np.deg2rad(2), 1)
        >>> int(hough_map.data[hough_map.y_index(0), hough_map.x_index(np.pi / 2)])
        255
        """
        hough_map = self.create_hough_map(pattern, delta_theta, delta_rho, properties)
        return self.transform_into(pattern, hough_map, properties)

    def transform_into(
        self,
        pattern: np.ndarray,
        hough_map: HoughMap,
        properties: Optional[dict] = None,
    ) -> HoughMap:
        """Write the Hough transform of a pattern into an existing map.

        The map's calibration and size decide the resolution. The
        transform is interrupted without error when the interruption
        event is set. The map then holds the normalized votes of the
        pixels scanned so far.

        Parameters
        ----------
        pattern
            EBSD pattern of shape (h, w) with integer intensities within
            [0, 255].
        hough_map
            Map to write into. Its data is overwritten.
        properties
            Pattern metadata copied to the map. If
            ``properties["units"]`` is given, it becomes the map's
            distance units.

        Returns
        -------
        hough_map
            The same map, with :attr:`~HoughMap.changed` set to True.

        Raises
        ------
        OutOfRangeError
            If a non-zero pixel lies farther from the pattern center
            than the distance range of the map.
        """
        pattern = _check_pattern(pattern)
        if properties is not None:
            hough_map.properties = dict(properties)
            if UNITS_KEY in properties:
                hough_map.rho_units = properties[UNITS_KEY]

        h, w = pattern.shape
        rows, cols = np.indices((h, w))
        xs = (cols - w // 2).astype(np.float64).ravel()
        ys = ((h - 1 - rows) - h // 2).astype(np.float64).ravel()
        values = pattern.astype(np.int64).ravel()

        nonzero = values > 0
        if np.any(nonzero):
            radius = float(np.max(np.hypot(xs[nonzero], ys[nonzero])))
            upper = hough_map.rho_max + 0.5 * hough_map.delta_rho
            if radius > upper:
                raise OutOfRangeError("Rho", radius, -upper, upper)

        thetas = hough_map.thetas
        cos_theta = np.cos(thetas)
        sin_theta = np.sin(thetas)
        sums = np.zeros(hough_map.shape, dtype=np.int64)
        counts = np.zeros(hough_map.shape, dtype=np.int64)

        size = values.size
        self.progress = 0.0
        self.n_pixels = 0
        _logger.debug(f"Transforming pattern of shape {pattern.shape} into {hough_map}")
        for start in range(0, size, self.check_interval):
            if self.interrupt_event.is_set():
                _logger.info(
                    f"Transform interrupted after {self.n_pixels} of {size} pixels"
                )
                break
            stop = min(start + self.check_interval, size)
            _accumulate(
                values,
                xs,
                ys,
                cos_theta,
                sin_theta,
                hough_map.delta_rho,
                sums,
                counts,
                start,
                stop,
            )
            self.n_pixels = stop
            self.progress = stop / size

        data = np.zeros(hough_map.shape, dtype=np.uint8)
        voted = counts > 0
        data[voted] = sums[voted] // counts[voted]
        hough_map.data = data
        hough_map.changed = True

        return hough_map


def hough_transform(
    pattern: np.ndarray,
    delta_theta: float,
    delta_rho: Optional[float] = None,
    properties: Optional[dict] = None,
) -> HoughMap:
    """Return the Hough transform of a pattern.

    See :meth:`HoughTransform.transform` for the parameters. The
    transform cannot be interrupted.
    """
    return HoughTransform().transform(pattern, delta_theta, delta_rho, properties)
