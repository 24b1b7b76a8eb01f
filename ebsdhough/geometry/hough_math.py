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

"""Conversions between Hough peaks, lines in the pattern and
diffraction plane normals.

Lines in the pattern are arrays of shape (2, 2) holding the column and
row of their two end points, with the origin in the upper left corner
of the pattern and rows increasing downwards. Hough peaks are relative
to the pattern center pixel, with y increasing upwards, as in
:class:`~ebsdhough.hough.HoughTransform`.
"""

from typing import Sequence, Tuple, Union

import numpy as np

from ebsdhough._util.exceptions import DegenerateValueError, InvalidInputError
from ebsdhough.geometry.camera import Camera
from ebsdhough.hough.hough_peak import HoughPeak


def _get_camera_position(camera: Union[Camera, np.ndarray, Sequence]) -> np.ndarray:
    if isinstance(camera, Camera):
        return camera.position
    position = np.asarray(camera, dtype=np.float64)
    if position.shape != (3,):
        raise InvalidInputError(
            f"Camera position must be a 3-vector, not of shape {position.shape}"
        )
    return position


def _check_image_shape(image_shape: Tuple[int, int]) -> Tuple[int, int]:
    if len(image_shape) != 2:
        raise InvalidInputError(f"Image shape {image_shape} must be (rows, columns)")
    h, w = image_shape
    if h < 1 or w < 1:
        raise InvalidInputError(f"Image shape {image_shape} must be positive")
    return int(h), int(w)


def peaks_to_normals(
    peaks: Sequence[HoughPeak], camera: Union[Camera, np.ndarray]
) -> np.ndarray:
    r"""Return the unit normals of the diffraction planes giving rise
    to Hough peaks.

    A peak :math:`(\theta, \rho)` is a line on the detector through
    :math:`P_0 = (\rho \cos\theta, 0, \rho \sin\theta)` with direction
    :math:`D = (-\sin\theta, 0, \cos\theta)`. The diffraction plane
    contains this line and the source point :math:`C`, so its normal
    is :math:`(P_0 - C) \times D`.

    Parameters
    ----------
    peaks
        Hough peaks in pixels.
    camera
        Camera, or its source point position as returned by
        :attr:`Camera.position`.

    Returns
    -------
    normals
        Unit normals of shape (n, 3).
    """
    position = _get_camera_position(camera)
    n = len(peaks)
    if n == 0:
        return np.zeros((0, 3))

    theta = np.array([p.theta for p in peaks])
    rho = np.array([p.rho for p in peaks])
    cos_theta = np.cos(theta)
    sin_theta = np.sin(theta)
    zeros = np.zeros(n)

    p0 = np.column_stack([rho * cos_theta, zeros, rho * sin_theta])
    d = np.column_stack([-sin_theta, zeros, cos_theta])
    normals = np.cross(p0 - position, d)
    norms = np.linalg.norm(normals, axis=1)
    if np.any(np.isclose(norms, 0)):
        raise DegenerateValueError("Plane normal")

    return normals / norms[:, np.newaxis]


def peak_to_normal(peak: HoughPeak, camera: Union[Camera, np.ndarray]) -> np.ndarray:
    """Return the unit normal of the diffraction plane giving rise to a
    Hough peak.

    See :func:`peaks_to_normals` for details.

    Examples
    --------
    A vertical line through the pattern center seen from a source point
    right in front of it

    >>> from ebsdhough.geometry import Camera, peak_to_normal
    >>> from ebsdhough.hough import HoughPeak
    >>> peak_to_normal(HoughPeak(0, 0), Camera(0, 0, 100))
    array([1., 0., 0.])
    """
    return peaks_to_normals([peak], camera)[0]


def normal_to_peak(
    normal: Union[np.ndarray, Sequence[float]],
    camera: Union[Camera, np.ndarray],
    intensity: float = 0.0,
) -> HoughPeak:
    r"""Return the Hough peak of the intersection between a diffraction
    plane and the detector.

    The plane through the source point :math:`C` with normal :math:`n`
    cuts the detector :math:`y = 0` along
    :math:`n_x x + n_z z = n \cdot C`.

    Parameters
    ----------
    normal
        Plane normal in the camera frame. Need not be normalized.
    camera
        Camera, or its source point position.
    intensity
        Intensity given to the peak. Default is 0.

    Returns
    -------
    peak
        Hough peak in pixels.

    Raises
    ------
    DegenerateValueError
        If the plane is parallel to the detector.
    """
    position = _get_camera_position(camera)
    normal = np.asarray(normal, dtype=np.float64)
    if normal.shape != (3,):
        raise InvalidInputError(
            f"Normal must be a 3-vector, not of shape {normal.shape}"
        )

    s = np.hypot(normal[0], normal[2])
    if s <= 1e-12 * np.linalg.norm(normal):
        raise DegenerateValueError("Plane normal", "parallel to the detector normal")

    theta = np.arctan2(normal[2], normal[0])
    rho = np.dot(normal, position) / s

    return HoughPeak(theta, rho, intensity)


def _image_to_centered(points: np.ndarray, h: int, w: int) -> np.ndarray:
    x = points[:, 0] - w // 2
    y = (h - 1 - points[:, 1]) - h // 2
    return np.column_stack([x, y])


def _centered_to_image(points: np.ndarray, h: int, w: int) -> np.ndarray:
    col = points[:, 0] + w // 2
    row = h - 1 - (points[:, 1] + h // 2)
    return np.column_stack([col, row])


def line_to_peak(
    line: np.ndarray, image_shape: Tuple[int, int], intensity: float = 0.0
) -> HoughPeak:
    """Return the Hough peak of a line in a pattern.

    Parameters
    ----------
    line
        Column and row of the two end points, of shape (2, 2).
    image_shape
        Number of pattern rows and columns.
    intensity
        Intensity given to the peak. Default is 0.

    Returns
    -------
    peak
        Hough peak in pixels. Vertical lines have a theta of 0.

    Raises
    ------
    DegenerateValueError
        If the two end points are equal.

    Examples
    --------
    >>> from ebsdhough.geometry import line_to_peak
    >>> line_to_peak([[12, 0], [12, 20]], (21, 21))
    HoughPeak (0.00 deg, 2.0 px): 0.0
    """
    h, w = _check_image_shape(image_shape)
    line = np.asarray(line, dtype=np.float64)
    if line.shape != (2, 2):
        raise InvalidInputError(f"Line must have shape (2, 2), not {line.shape}")

    p0, p1 = _image_to_centered(line, h, w)
    dx, dy = p1 - p0
    length = np.hypot(dx, dy)
    if np.isclose(length, 0):
        raise DegenerateValueError("Line", "of zero length")

    normal = np.array([-dy, dx]) / length
    theta = np.arctan2(normal[1], normal[0])
    rho = np.dot(normal, p0)

    return HoughPeak(theta, rho, intensity)


def peak_to_line(peak: HoughPeak, image_shape: Tuple[int, int]) -> np.ndarray:
    """Return a line in a pattern from a Hough peak.

    The line is centered on the point closest to the pattern center and
    is as long as the pattern diagonal, so that it crosses the whole
    pattern.

    Parameters
    ----------
    peak
        Hough peak in pixels.
    image_shape
        Number of pattern rows and columns.

    Returns
    -------
    line
        Column and row of the two end points, of shape (2, 2).
    """
    h, w = _check_image_shape(image_shape)
    cos_theta = np.cos(peak.theta)
    sin_theta = np.sin(peak.theta)

    foot = peak.rho * np.array([cos_theta, sin_theta])
    direction = np.array([-sin_theta, cos_theta])
    half_length = 0.5 * np.hypot(w, h)
    points = np.stack([foot - half_length * direction, foot + half_length * direction])

    return _centered_to_image(points, h, w)


def fit(peaks_a: Sequence[HoughPeak], peaks_b: Sequence[HoughPeak]) -> float:
    """Return how well one list of Hough peaks matches another.

    For each peak in ``peaks_a``, the smallest squared distance in
    (theta, rho) to a peak in ``peaks_b`` is found. The fit is the mean
    of these distances, so lower is better.

    Parameters
    ----------
    peaks_a, peaks_b
        Hough peaks.

    Returns
    -------
    fit
        Mean smallest squared distance, or infinity if ``peaks_a`` is
        empty, or if ``peaks_b`` is empty.
    """
    if len(peaks_a) == 0 or len(peaks_b) == 0:
        return np.inf

    a = np.array([(p.theta, p.rho) for p in peaks_a])
    b = np.array([(p.theta, p.rho) for p in peaks_b])
    distances = np.sum((a[:, np.newaxis] - b[np.newaxis]) ** 2, axis=-1)

    return float(np.mean(np.min(distances, axis=1)))
