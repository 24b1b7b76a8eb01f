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

from typing import Sequence, Tuple, Union

import numpy as np

from ebsdhough._util.exceptions import InvalidInputError


class Camera:
    r"""Geometry of an EBSD camera used to project Hough peaks to
    diffraction plane normals.

    The frame is centered on the pattern center pixel, with the x axis
    towards the right of the detector, the z axis upwards on the
    detector and the y axis from the detector towards the sample side.
    The detector is the plane :math:`y = 0` and the source point, where
    the beam hits the sample, is at
    :math:`(PC_h, -D, PC_v)`.

    Parameters
    ----------
    pattern_center_h
        Horizontal coordinate of the pattern center in pixels, relative
        to the pattern center pixel and positive to the right. Default
        is 0.
    pattern_center_v
        Vertical coordinate of the pattern center in pixels, relative to
        the pattern center pixel and positive upwards. Default is 0.
    detector_distance
        Distance between the source point and the detector in pixels.
        Default is 1.

    Raises
    ------
    InvalidInputError
        If a value is not finite or the detector distance is not
        positive.

    See Also
    --------
    Camera.from_bruker_pc

    Examples
    --------
    >>> from ebsdhough.geometry import Camera
    >>> camera = Camera(10, -5, 200)
    >>> camera
    Camera (10.0, -5.0, 200.0) px
    >>> camera.position
    array([  10., -200.,   -5.])
    """

    def __init__(
        self,
        pattern_center_h: float = 0.0,
        pattern_center_v: float = 0.0,
        detector_distance: float = 1.0,
    ):
        values = [pattern_center_h, pattern_center_v, detector_distance]
        for name, value in zip(["PC_h", "PC_v", "Detector distance"], values):
            if not np.isfinite(value):
                raise InvalidInputError(f"{name} ({value}) must be finite")
        if detector_distance <= 0:
            raise InvalidInputError(
                f"Detector distance ({detector_distance}) must be > 0"
            )
        self._pattern_center_h = float(pattern_center_h)
        self._pattern_center_v = float(pattern_center_v)
        self._detector_distance = float(detector_distance)

    @classmethod
    def from_bruker_pc(
        cls, pc: Union[Sequence[float], np.ndarray], shape: Tuple[int, int]
    ) -> "Camera":
        r"""Return a camera from a projection center in Bruker's
        convention.

        Parameters
        ----------
        pc
            Bruker projection center :math:`(PC_x, PC_y, PC_z)`. The
            first two are fractions of the number of columns and rows,
            measured from the upper left corner of the detector, while
            the last is a fraction of the number of rows.
        shape
            Number of detector rows and columns in pixels.

        Returns
        -------
        camera
            Camera with the pattern center in pixels about the detector
            center.

        Notes
        -----
        With :math:`N_x` columns and :math:`N_y` rows

        .. math::

            PC_h &= N_x PC_x - N_x / 2,\\
            PC_v &= N_y / 2 - N_y PC_y,\\
            D &= N_y PC_z.

        Examples
        --------
        >>> from ebsdhough.geometry import Camera
        >>> Camera.from_bruker_pc([0.4, 0.2, 0.5], (60, 80))
        Camera (-8.0, 18.0, 30.0) px
        """
        pc = np.asarray(pc, dtype=np.float64)
        if pc.shape != (3,):
            raise InvalidInputError(f"PC must have three values, not shape {pc.shape}")
        nrows, ncols = shape
        if nrows < 1 or ncols < 1:
            raise InvalidInputError(f"Detector shape {shape} must be positive")
        pcx, pcy, pcz = pc
        return cls(
            pattern_center_h=pcx * ncols - ncols / 2,
            pattern_center_v=nrows / 2 - pcy * nrows,
            detector_distance=pcz * nrows,
        )

    def __repr__(self) -> str:
        pc_h = np.round(self.pattern_center_h, 3)
        pc_v = np.round(self.pattern_center_v, 3)
        dd = np.round(self.detector_distance, 3)
        return f"{type(self).__name__} ({pc_h}, {pc_v}, {dd}) px"

    @property
    def pattern_center_h(self) -> float:
        """Return the horizontal pattern center coordinate in pixels."""
        return self._pattern_center_h

    @property
    def pattern_center_v(self) -> float:
        """Return the vertical pattern center coordinate in pixels."""
        return self._pattern_center_v

    @property
    def detector_distance(self) -> float:
        """Return the detector distance in pixels."""
        return self._detector_distance

    @property
    def position(self) -> np.ndarray:
        """Return the source point position ``(PC_h, -D, PC_v)``."""
        return np.array(
            [self.pattern_center_h, -self.detector_distance, self.pattern_center_v]
        )

    def to_bruker_pc(self, shape: Tuple[int, int]) -> np.ndarray:
        """Return the projection center in Bruker's convention.

        Parameters
        ----------
        shape
            Number of detector rows and columns in pixels.

        Returns
        -------
        pc
            Bruker projection center :math:`(PC_x, PC_y, PC_z)`.

        See Also
        --------
        Camera.from_bruker_pc
        """
        nrows, ncols = shape
        if nrows < 1 or ncols < 1:
            raise InvalidInputError(f"Detector shape {shape} must be positive")
        return np.array(
            [
                (self.pattern_center_h + ncols / 2) / ncols,
                (nrows / 2 - self.pattern_center_v) / nrows,
                self.detector_distance / nrows,
            ]
        )
