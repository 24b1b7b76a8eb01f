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

"""Pairs of plane normals and their direction cosines."""

from typing import Iterator, List, Sequence, Union

import numpy as np

from ebsdhough._util.exceptions import InvalidInputError
from ebsdhough.constants import PARALLEL_TOLERANCE
from ebsdhough.geometry.camera import Camera
from ebsdhough.geometry.hough_math import peaks_to_normals
from ebsdhough.hough.hough_peak import HoughPeak
from ebsdhough.indexing.phase import Reflector


class Pair:
    """Two plane normals and the absolute cosine of the angle between
    them.

    Parameters
    ----------
    normal0, normal1
        Unit plane normals.
    source0, source1
        Hough peaks or reflectors the normals were derived from.
    """

    __slots__ = ("_normal0", "_normal1", "_dot", "_source0", "_source1")

    def __init__(
        self,
        normal0: np.ndarray,
        normal1: np.ndarray,
        source0: Union[None, HoughPeak, Reflector] = None,
        source1: Union[None, HoughPeak, Reflector] = None,
    ):
        self._normal0 = np.array(normal0, dtype=np.float64)
        self._normal1 = np.array(normal1, dtype=np.float64)
        self._normal0.flags.writeable = False
        self._normal1.flags.writeable = False
        self._dot = float(np.clip(np.dot(self._normal0, self._normal1), -1, 1))
        self._source0 = source0
        self._source1 = source1

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__} ({self.source0!r}, {self.source1!r}): "
            f"{self.direction_cosine:.6f}"
        )

    @property
    def normal0(self) -> np.ndarray:
        """Return the first normal."""
        return self._normal0

    @property
    def normal1(self) -> np.ndarray:
        """Return the second normal."""
        return self._normal1

    @property
    def dot(self) -> float:
        """Return the signed dot product of the two normals."""
        return self._dot

    @property
    def direction_cosine(self) -> float:
        """Return the absolute dot product of the two normals."""
        return abs(self._dot)

    @property
    def source0(self) -> Union[None, HoughPeak, Reflector]:
        """Return what the first normal was derived from."""
        return self._source0

    @property
    def source1(self) -> Union[None, HoughPeak, Reflector]:
        """Return what the second normal was derived from."""
        return self._source1


class PeakPairSet:
    """An ordered collection of pairs.

    Pairs are never modified, only reordered.

    Parameters
    ----------
    pairs
        Pairs in the initial order.

    See Also
    --------
    PeakPairSet.from_peaks, PeakPairSet.from_reflectors
    """

    def __init__(self, pairs: Sequence[Pair] = ()):
        self._pairs = list(pairs)

    @classmethod
    def from_peaks(
        cls, peaks: Sequence[HoughPeak], camera: Union[Camera, np.ndarray]
    ) -> "PeakPairSet":
        """Return all pairs of experimental Hough peaks.

        Parameters
        ----------
        peaks
            Hough peaks in pixels.
        camera
            Camera used to get the plane normals of the peaks.

        Returns
        -------
        pairs
            Pairs ordered so that pairs of the most intense peaks come
            first. The first pair is made of the two most intense peaks.
        """
        peaks = sorted(peaks, key=lambda p: p.intensity, reverse=True)
        normals = peaks_to_normals(peaks, camera)
        pairs = []
        n = len(peaks)
        for i in range(n):
            for j in range(i + 1, n):
                pairs.append(Pair(normals[i], normals[j], peaks[i], peaks[j]))
        return cls(pairs)

    @classmethod
    def from_reflectors(
        cls,
        reflectors: Sequence[Reflector],
        parallel_tolerance: float = PARALLEL_TOLERANCE,
    ) -> "PeakPairSet":
        """Return all pairs of non-parallel reflectors.

        Parameters
        ----------
        reflectors
            Reflectors of a phase.
        parallel_tolerance
            Pairs with a direction cosine closer to 1 than this are
            discarded. Default is 1e-7.

        Returns
        -------
        pairs
            Pairs sorted by increasing direction cosine.
        """
        reflectors = sorted(reflectors, key=lambda r: r.intensity, reverse=True)
        pairs = []
        n = len(reflectors)
        for i in range(n):
            for j in range(i + 1, n):
                r0 = reflectors[i]
                r1 = reflectors[j]
                pair = Pair(r0.normal, r1.normal, r0, r1)
                if abs(pair.direction_cosine - 1) <= parallel_tolerance:
                    continue
                pairs.append(pair)
        pair_set = cls(pairs)
        pair_set.sort_by_direction_cosine()
        return pair_set

    def __repr__(self) -> str:
        return f"{type(self).__name__} ({len(self)} pairs)"

    def __len__(self) -> int:
        return len(self._pairs)

    def __getitem__(self, key) -> Pair:
        return self._pairs[key]

    def __iter__(self) -> Iterator[Pair]:
        return iter(self._pairs)

    @property
    def direction_cosines(self) -> np.ndarray:
        """Return the direction cosine of each pair."""
        return np.array([p.direction_cosine for p in self._pairs])

    def sort_by_direction_cosine(self, reverse: bool = False):
        """Sort the pairs by direction cosine in place.

        Parameters
        ----------
        reverse
            Whether to sort in decreasing order. Default is False.
        """
        self._pairs.sort(key=lambda p: p.direction_cosine, reverse=reverse)

    def find_closest_matches(
        self, direction_cosine: float, precision: float
    ) -> List[Pair]:
        """Return the pairs with a direction cosine closest to a value.

        The pair closest to ``direction_cosine`` is found, and all pairs
        within ``precision`` of that pair's direction cosine are
        returned, in the order of the set.

        Parameters
        ----------
        direction_cosine
            Desired direction cosine.
        precision
            Largest difference to the closest direction cosine.

        Returns
        -------
        matches
            Closest pairs, empty if the set is empty.

        Raises
        ------
        InvalidInputError
            If ``precision`` is negative or NaN, or if
            ``direction_cosine`` is NaN or infinite.
        """
        if np.isnan(precision) or precision < 0:
            raise InvalidInputError(f"Precision ({precision}) must be a number >= 0")
        if not np.isfinite(direction_cosine):
            raise InvalidInputError(
                f"Direction cosine ({direction_cosine}) must be finite"
            )
        if len(self) == 0:
            return []

        dcs = self.direction_cosines
        closest = dcs[np.argmin(np.abs(dcs - direction_cosine))]
        return [p for p, dc in zip(self._pairs, dcs) if abs(dc - closest) <= precision]
