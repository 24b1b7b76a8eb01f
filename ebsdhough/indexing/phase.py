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

"""Candidate phases and their reflectors, the theoretical input to
orientation indexing.
"""

from typing import List, Optional, Sequence, Union

from diffpy.structure import Lattice
import numpy as np
from orix.crystal_map import Phase

from ebsdhough._util.exceptions import DegenerateValueError, InvalidInputError
from ebsdhough._util.rotation import (
    _proper_symmetry_quaternions,
    _quaternion_to_matrix,
)


class Reflector:
    """A diffracting lattice plane of a phase.

    Parameters
    ----------
    normal
        Plane normal in the crystal frame. It is normalized.
    intensity
        Diffracted intensity, used to rank reflectors. Default is 1.
    hkl
        Miller indices of the plane, kept for reference only.

    Raises
    ------
    DegenerateValueError
        If the normal is a zero vector or not finite.
    """

    __slots__ = ("_normal", "_intensity", "_hkl")

    def __init__(
        self,
        normal: Union[np.ndarray, Sequence[float]],
        intensity: float = 1.0,
        hkl: Optional[Sequence[int]] = None,
    ):
        normal = np.asarray(normal, dtype=np.float64)
        if normal.shape != (3,):
            raise InvalidInputError(
                f"Normal must be a 3-vector, not of shape {normal.shape}"
            )
        norm = np.linalg.norm(normal)
        if not np.isfinite(norm) or np.isclose(norm, 0):
            raise DegenerateValueError("Reflector normal", normal.tolist())
        if not np.isfinite(intensity):
            raise DegenerateValueError("Reflector intensity", intensity)

        self._normal = normal / norm
        self._normal.flags.writeable = False
        self._intensity = float(intensity)
        if hkl is not None:
            hkl = tuple(int(i) for i in hkl)
        self._hkl = hkl

    def __repr__(self) -> str:
        if self.hkl is not None:
            label = "(" + " ".join(str(i) for i in self.hkl) + ")"
        else:
            label = np.array2string(self.normal, precision=3)
        return f"{type(self).__name__} {label}: {self.intensity}"

    @property
    def normal(self) -> np.ndarray:
        """Return the unit plane normal in the crystal frame."""
        return self._normal

    @property
    def intensity(self) -> float:
        """Return the diffracted intensity."""
        return self._intensity

    @property
    def hkl(self) -> Optional[tuple]:
        """Return the Miller indices, if known."""
        return self._hkl


class CandidatePhase:
    """A phase which patterns may be indexed against.

    Parameters
    ----------
    name
        Name of the phase, used to tell solutions apart.
    symmetry
        Point group of the phase, as an orix
        :class:`~orix.quaternion.Symmetry` or
        :class:`~orix.quaternion.Rotation`, an array of quaternions of
        shape (n, 4) or an array of rotation matrices of shape
        (n, 3, 3). Only the proper rotations are kept. If None, the
        phase has no symmetry.
    reflectors
        Reflectors of the phase.

    See Also
    --------
    CandidatePhase.from_hkl, CandidatePhase.from_phase
    """

    def __init__(
        self,
        name: str,
        symmetry=None,
        reflectors: Sequence[Reflector] = (),
    ):
        if not isinstance(name, str) or name == "":
            raise InvalidInputError(f"Phase name ({name!r}) must be a non-empty str")
        reflectors = list(reflectors)
        for reflector in reflectors:
            if not isinstance(reflector, Reflector):
                raise InvalidInputError(
                    f"Reflectors must be Reflector instances, not {type(reflector)}"
                )
        self._name = name
        self._symmetry = symmetry
        self._symmetry_quaternions = _proper_symmetry_quaternions(symmetry)
        self._reflectors = reflectors

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__} {self.name!r}: "
            f"{self.symmetry_quaternions.shape[0]} proper symmetry operations, "
            f"{len(self.reflectors)} reflectors"
        )

    @classmethod
    def from_hkl(
        cls,
        name: str,
        hkl: Union[np.ndarray, Sequence[Sequence[int]]],
        lattice: Lattice,
        symmetry=None,
        intensities: Union[None, np.ndarray, Sequence[float]] = None,
        expand: bool = True,
    ) -> "CandidatePhase":
        """Return a phase with reflectors from Miller indices.

        Parameters
        ----------
        name
            Name of the phase.
        hkl
            Miller indices of shape (n, 3).
        lattice
            Crystal lattice giving the reciprocal basis used to get the
            plane normals.
        symmetry
            Point group of the phase, see :class:`CandidatePhase`.
        intensities
            Intensity of each plane. If not given, all planes have an
            intensity of 1.
        expand
            Whether to add the planes symmetrically equivalent to the
            given ones. Equivalent planes get the same intensity.
            Default is True.

        Returns
        -------
        phase
            Candidate phase.

        Examples
        --------
        >>> from diffpy.structure import Lattice
        >>> from ebsdhough.indexing import CandidatePhase
        >>> from orix.quaternion.symmetry import Oh
        >>> phase = CandidatePhase.from_hkl(
        ...     "ni", [[1, 1, 1], [2, 0, 0]], Lattice(3.52, 3.52, 3.52, 90, 90, 90), Oh
        ... )
        >>> len(phase.reflectors)
        7
        """
        hkl = np.atleast_2d(np.asarray(hkl, dtype=np.float64))
        if hkl.ndim != 2 or hkl.shape[1] != 3:
            raise InvalidInputError(f"hkl must have shape (n, 3), not {hkl.shape}")
        if intensities is None:
            intensities = np.ones(hkl.shape[0])
        intensities = np.asarray(intensities, dtype=np.float64).ravel()
        if intensities.size != hkl.shape[0]:
            raise InvalidInputError(
                f"Number of intensities ({intensities.size}) must be equal to the "
                f"number of planes ({hkl.shape[0]})"
            )

        recbase = np.asarray(lattice.recbase, dtype=np.float64)
        base = np.asarray(lattice.base, dtype=np.float64)
        g = hkl @ recbase.T

        if expand:
            operations = [
                _quaternion_to_matrix(q)
                for q in _proper_symmetry_quaternions(symmetry)
            ]
        else:
            operations = [np.eye(3)]

        reflectors = []
        unit_normals = []
        for g_i, intensity in zip(g, intensities):
            for matrix in operations:
                g_eq = matrix @ g_i
                u = g_eq / np.linalg.norm(g_eq)
                # A plane and its opposite diffract along the same band
                if any(abs(np.dot(u, v)) > 1 - 1e-8 for v in unit_normals):
                    continue
                unit_normals.append(u)
                hkl_eq = np.round(g_eq @ base.T).astype(int)
                reflectors.append(Reflector(g_eq, intensity, hkl_eq))

        return cls(name, symmetry, reflectors)

    @classmethod
    def from_phase(
        cls,
        phase: Phase,
        hkl: Union[np.ndarray, Sequence[Sequence[int]]],
        intensities: Union[None, np.ndarray, Sequence[float]] = None,
        expand: bool = True,
    ) -> "CandidatePhase":
        """Return a candidate phase from an orix phase.

        Parameters
        ----------
        phase
            Phase with a point group and a structure lattice.
        hkl, intensities, expand
            See :meth:`from_hkl`.

        Returns
        -------
        phase
            Candidate phase with the name and point group of ``phase``.
        """
        if phase.point_group is None:
            raise InvalidInputError(f"Phase {phase.name!r} must have a point group")
        name = phase.name
        if name == "":
            name = phase.point_group.name
        return cls.from_hkl(
            name,
            hkl,
            phase.structure.lattice,
            phase.point_group,
            intensities=intensities,
            expand=expand,
        )

    @property
    def name(self) -> str:
        """Return the phase name."""
        return self._name

    @property
    def symmetry(self):
        """Return the symmetry as given."""
        return self._symmetry

    @property
    def symmetry_quaternions(self) -> np.ndarray:
        """Return the unique proper symmetry operations as quaternions
        of shape (n, 4), the identity first.
        """
        return self._symmetry_quaternions

    @property
    def reflectors(self) -> List[Reflector]:
        """Return the reflectors."""
        return self._reflectors

    @property
    def normals(self) -> np.ndarray:
        """Return the reflector normals of shape (n, 3)."""
        if len(self.reflectors) == 0:
            return np.zeros((0, 3))
        return np.stack([r.normal for r in self.reflectors])
