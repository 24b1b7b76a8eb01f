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

"""Orientation indexing from pairs of Hough peaks.

The two most intense Hough peaks form a reference pair. Its
interplanar angle is compared to the angles between the reflectors of
each candidate phase, and every matching reflector pair gives a
candidate orientation. Candidates are scored by how well the rotated
reflectors explain all the Hough peaks.
"""

import logging
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np
from orix.quaternion import Orientation, Rotation, Symmetry
from tqdm import tqdm

from ebsdhough._util.exceptions import InvalidInputError
from ebsdhough._util.rotation import (
    _matrix_to_quaternion,
    _quaternion_to_matrix,
    _reduce_quaternion,
)
from ebsdhough.constants import (
    DIRECTION_COSINE_TOLERANCE,
    KEY_PRECISION,
    MIN_PEAKS,
    PARALLEL_TOLERANCE,
)
from ebsdhough.geometry.camera import Camera
from ebsdhough.geometry.hough_math import peaks_to_normals
from ebsdhough.hough.hough_peak import HoughPeak
from ebsdhough.indexing.pairs import Pair, PeakPairSet
from ebsdhough.indexing.phase import CandidatePhase

_logger = logging.getLogger(__name__)

# Dot products closer to zero than this are considered to have no sign
_ZERO_DOT = 1e-8


class Solution:
    """A crystal orientation found by indexing.

    Parameters
    ----------
    phase
        Phase of the solution.
    rotation
        Rotation taking vectors in the camera frame to the crystal
        frame.
    fit
        Mean, over the Hough peaks, of the largest direction cosine
        between a peak's plane normal and the rotated reflector normals.
        Within [0, 1], higher is better.
    """

    __slots__ = ("_phase", "_rotation", "_fit")

    def __init__(self, phase: CandidatePhase, rotation: Rotation, fit: float):
        self._phase = phase
        self._rotation = rotation
        self._fit = float(fit)

    def __repr__(self) -> str:
        q = np.array2string(self.quaternion, precision=4, separator=", ")
        return f"{type(self).__name__} {self.phase_name!r}: fit {self.fit:.4f}, {q}"

    @property
    def phase(self) -> CandidatePhase:
        """Return the phase."""
        return self._phase

    @property
    def phase_name(self) -> str:
        """Return the phase name."""
        return self._phase.name

    @property
    def rotation(self) -> Rotation:
        """Return the rotation from the camera frame to the crystal
        frame.
        """
        return self._rotation

    @property
    def fit(self) -> float:
        """Return the fit within [0, 1], higher is better."""
        return self._fit

    @property
    def quaternion(self) -> np.ndarray:
        """Return the rotation as a unit quaternion ``[a, b, c, d]``
        with a non-negative scalar part ``a``.
        """
        return np.asarray(self._rotation.data, dtype=np.float64).reshape(4)

    @property
    def matrix(self) -> np.ndarray:
        """Return the rotation matrix ``g``, so that a vector ``v`` in
        the camera frame is ``g @ v`` in the crystal frame.
        """
        return _quaternion_to_matrix(self.quaternion)

    def misorientation_angle(self, rotation) -> float:
        """Return the smallest angle of the rotation between this
        solution and another camera to crystal rotation, over the proper
        symmetry operations of the phase.

        Parameters
        ----------
        rotation : orix.quaternion.Rotation or numpy.ndarray
            Another rotation, as an orix rotation, a quaternion of shape
            (4,) or a rotation matrix of shape (3, 3) following
            :attr:`matrix`.

        Returns
        -------
        angle
            Misorientation angle in radians.
        """
        symmetry = Symmetry(self.phase.symmetry_quaternions)
        this = Orientation(self.quaternion, symmetry)
        other = Orientation(_rotation_to_quaternion(rotation), symmetry)
        angle = this.angle_with(other)
        return float(np.asarray(angle).squeeze())


def _rotation_to_quaternion(rotation) -> np.ndarray:
    if isinstance(rotation, Rotation):
        q = np.asarray(rotation.data, dtype=np.float64).reshape((-1, 4))
        if q.shape[0] != 1:
            raise InvalidInputError(f"Expected a single rotation, got {q.shape[0]}")
        q = q[0]
    else:
        arr = np.asarray(rotation, dtype=np.float64)
        if arr.shape == (3, 3):
            q = _matrix_to_quaternion(np.ascontiguousarray(arr))
        elif arr.shape == (4,):
            q = arr
        else:
            raise InvalidInputError(
                "Rotation must be a quaternion of shape (4,) or a matrix of shape "
                f"(3, 3), not an array of shape {arr.shape}"
            )
    norm = np.linalg.norm(q)
    if np.isclose(norm, 0):
        raise InvalidInputError("Rotation cannot be a zero quaternion")
    return np.ascontiguousarray(q / norm)


def _orthonormal_basis(normal0: np.ndarray, normal1: np.ndarray) -> np.ndarray:
    """Return the rows ``(n0 + n1, n0 - n1, (n0 + n1) x (n0 - n1))``,
    normalized.
    """
    b0 = normal0 + normal1
    b1 = normal0 - normal1
    b0 = b0 / np.linalg.norm(b0)
    b1 = b1 / np.linalg.norm(b1)
    return np.stack([b0, b1, np.cross(b0, b1)])


def _generate_permutations(pair: Pair) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Return the eight sign and order arrangements of a pair's normals
    giving the same direction cosine.
    """
    n0 = pair.normal0
    n1 = pair.normal1
    return [
        (n0, n1),
        (-n0, n1),
        (n0, -n1),
        (-n0, -n1),
        (n1, n0),
        (-n1, n0),
        (n1, -n0),
        (-n1, -n0),
    ]


def _dot_sign(value: float) -> int:
    if abs(value) <= _ZERO_DOT:
        return 0
    return 1 if value > 0 else -1


def _prune_permutations(
    permutations: List[Tuple[np.ndarray, np.ndarray]], reference_dot: float
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Return the arrangements with a dot product of the same sign as
    the reference pair, or with either dot product being zero.
    """
    reference_sign = _dot_sign(reference_dot)
    kept = []
    for n0, n1 in permutations:
        sign = _dot_sign(float(np.dot(n0, n1)))
        if sign == 0 or reference_sign == 0 or sign == reference_sign:
            kept.append((n0, n1))
    return kept


def _fit(
    experimental_normals: np.ndarray, reflector_normals: np.ndarray, g: np.ndarray
) -> float:
    if reflector_normals.shape[0] == 0:
        return 0.0
    rotated = reflector_normals @ g
    cosines = np.abs(experimental_normals @ rotated.T)
    return float(np.mean(np.max(cosines, axis=1)))


class OrientationIndexer:
    """Indexing of Hough peaks against candidate phases.

    Parameters
    ----------
    direction_cosine_tolerance
        Largest difference between the direction cosine of the
        reference peak pair and of matching reflector pairs. Default is
        0.1.
    key_precision
        Precision at which the quaternion components of two solutions
        must agree for them to be considered equal. Default is 1e-6.
    parallel_tolerance
        Reflector pairs closer than this to parallel are not matched.
        Default is 1e-7.
    show_progressbar
        Whether to show a progressbar over the phases. Default is False.

    Attributes
    ----------
    status : str
        Last status message.
    progress : float
        Fraction of the phases inspected by the last call to
        :meth:`index`.

    Examples
    --------
    >>> from ebsdhough.indexing import OrientationIndexer
    >>> indexer = OrientationIndexer(show_progressbar=True)
    >>> solutions = indexer.index(phases, peaks, camera)  # doctest: +SKIP
    >>> best = max(solutions, key=lambda s: s.fit)  # doctest: +SKIP
    """

    def __init__(
        self,
        direction_cosine_tolerance: float = DIRECTION_COSINE_TOLERANCE,
        key_precision: float = KEY_PRECISION,
        parallel_tolerance: float = PARALLEL_TOLERANCE,
        show_progressbar: bool = False,
    ):
        if np.isnan(direction_cosine_tolerance) or direction_cosine_tolerance < 0:
            raise InvalidInputError(
                f"Direction cosine tolerance ({direction_cosine_tolerance}) must be "
                "a number >= 0"
            )
        if not key_precision > 0:
            raise InvalidInputError(f"Key precision ({key_precision}) must be > 0")
        self.direction_cosine_tolerance = float(direction_cosine_tolerance)
        self.key_precision = float(key_precision)
        self.parallel_tolerance = float(parallel_tolerance)
        self.show_progressbar = show_progressbar
        self.status = ""
        self.progress = 0.0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__} (tolerance {self.direction_cosine_tolerance}, "
            f"key precision {self.key_precision})"
        )

    def _set_status(self, status: str, level: int = logging.DEBUG):
        self.status = status
        _logger.log(level, status)

    def _key(self, phase_name: str, q: np.ndarray) -> Tuple[str, tuple]:
        quantized = np.round(q / self.key_precision).astype(np.int64)
        return phase_name, tuple(quantized.tolist())

    def index(
        self,
        phases: Sequence[CandidatePhase],
        peaks: Sequence[HoughPeak],
        camera: Union[Camera, np.ndarray],
    ) -> List[Solution]:
        """Return the orientations explaining a set of Hough peaks.

        Parameters
        ----------
        phases
            Candidate phases.
        peaks
            Hough peaks in pixels, at least three.
        camera
            Camera used to get the plane normals of the peaks.

        Returns
        -------
        solutions
            One solution per unique orientation (modulo the phase's
            symmetry) and phase. The order carries no meaning; sort by
            :attr:`Solution.fit` to rank them.

        Raises
        ------
        InvalidInputError
            If there are no phases, fewer than three peaks, or if the
            two most intense peaks give parallel plane normals.
        """
        phases = list(phases)
        peaks = list(peaks)
        if len(phases) < 1:
            raise InvalidInputError("At least one phase must be given")
        if len(peaks) < MIN_PEAKS:
            raise InvalidInputError(
                f"At least {MIN_PEAKS} Hough peaks must be given, not {len(peaks)}"
            )

        self.progress = 0.0
        experimental_pairs = PeakPairSet.from_peaks(peaks, camera)
        reference = experimental_pairs[0]
        if abs(reference.direction_cosine - 1) <= self.parallel_tolerance:
            raise InvalidInputError(
                "The two most intense Hough peaks give parallel plane normals"
            )
        self._set_status(f"Most intense Hough peak pair: {reference}", logging.INFO)
        es = _orthonormal_basis(reference.normal0, reference.normal1)

        experimental_normals = peaks_to_normals(peaks, camera)

        solutions: Dict[Tuple[str, tuple], Solution] = {}

        iterable = phases
        if self.show_progressbar:
            iterable = tqdm(phases, total=len(phases), desc="Indexing phases")

        for i, phase in enumerate(iterable):
            theoretical_pairs = PeakPairSet.from_reflectors(
                phase.reflectors, self.parallel_tolerance
            )
            matches = theoretical_pairs.find_closest_matches(
                reference.direction_cosine, self.direction_cosine_tolerance
            )
            self._set_status(
                f"Inspecting phase {phase.name!r}: {len(theoretical_pairs)} "
                f"theoretical pairs, {len(matches)} matches",
                logging.INFO,
            )

            reflector_normals = phase.normals
            symmetry = phase.symmetry_quaternions
            for match in matches:
                permutations = _prune_permutations(
                    _generate_permutations(match), reference.dot
                )
                self._set_status(
                    f"....Inspecting match {match}: {len(permutations)} "
                    "possibilities"
                )
                for n0, n1 in permutations:
                    ec = _orthonormal_basis(n0, n1)
                    g = ec.T @ es
                    q = _matrix_to_quaternion(np.ascontiguousarray(g))
                    q = _reduce_quaternion(q, symmetry)

                    key = self._key(phase.name, q)
                    if key in solutions:
                        continue

                    g = _quaternion_to_matrix(q)
                    fit = _fit(experimental_normals, reflector_normals, g)
                    solutions[key] = Solution(phase, Rotation(q), fit)
                    self._set_status(f"......New solution {solutions[key]}")

            self.progress = (i + 1) / len(phases)

        self._set_status(f"Found {len(solutions)} solutions", logging.INFO)

        return list(solutions.values())


def index(
    phases: Sequence[CandidatePhase],
    peaks: Sequence[HoughPeak],
    camera: Union[Camera, np.ndarray],
    **kwargs,
) -> List[Solution]:
    """Return the orientations explaining a set of Hough peaks.

    Parameters
    ----------
    phases, peaks, camera
        See :meth:`OrientationIndexer.index`.
    **kwargs
        Keyword arguments passed to :class:`OrientationIndexer`.

    Returns
    -------
    solutions
        Solutions in no particular order.
    """
    return OrientationIndexer(**kwargs).index(phases, peaks, camera)
