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

"""Private tools for handling rotations as unit quaternions and
rotation matrices.

Quaternions are stored as ``[a, b, c, d]`` with ``a`` the scalar part.
A quaternion rotates a vector actively, ``v' = q v q*``, and its matrix
is the one returned by :func:`_quaternion_to_matrix`.

This module and documentation is only relevant for ebsdhough
developers, not for users.

.. warning:

    This module and its submodules are for internal use only.  Do not
    use them in your own code. We may change the API at any time with no
    warning.
"""

from numba import njit
import numpy as np

from ebsdhough._util.exceptions import InvalidInputError

_EPS = 1e-12


@njit("float64[:, :](float64[:])", cache=True, nogil=True, fastmath=True)
def _quaternion_to_matrix(q: np.ndarray) -> np.ndarray:
    a, b, c, d = q
    aa = a**2
    bb = b**2
    cc = c**2
    dd = d**2
    ab = a * b
    ac = a * c
    ad = a * d
    bc = b * c
    bd = b * d
    cd = c * d
    m = np.zeros((3, 3), dtype=np.float64)
    m[0, 0] = aa + bb - cc - dd
    m[0, 1] = 2 * (bc - ad)
    m[0, 2] = 2 * (bd + ac)
    m[1, 0] = 2 * (bc + ad)
    m[1, 1] = aa - bb + cc - dd
    m[1, 2] = 2 * (cd - ab)
    m[2, 0] = 2 * (bd - ac)
    m[2, 1] = 2 * (cd + ab)
    m[2, 2] = aa - bb - cc + dd
    return m


@njit("float64[:](float64[:])", cache=True, nogil=True)
def _canonical_sign(q: np.ndarray) -> np.ndarray:
    """Return the one of ``q`` and ``-q`` with a positive scalar part,
    or, for half turns, with a positive first non-zero vector part.
    """
    q2 = q.copy()
    flip = False
    if q2[0] < -_EPS:
        flip = True
    elif abs(q2[0]) <= _EPS:
        for i in range(1, 4):
            if abs(q2[i]) > _EPS:
                flip = q2[i] < 0
                break
    if flip:
        for i in range(4):
            q2[i] = -q2[i]
    return q2


@njit("float64[:](float64[:, :])", cache=True, nogil=True)
def _matrix_to_quaternion(m: np.ndarray) -> np.ndarray:
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    q = np.zeros(4, dtype=np.float64)
    if trace > 0:
        s = 2 * np.sqrt(trace + 1)
        q[0] = 0.25 * s
        q[1] = (m[2, 1] - m[1, 2]) / s
        q[2] = (m[0, 2] - m[2, 0]) / s
        q[3] = (m[1, 0] - m[0, 1]) / s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2 * np.sqrt(1 + m[0, 0] - m[1, 1] - m[2, 2])
        q[0] = (m[2, 1] - m[1, 2]) / s
        q[1] = 0.25 * s
        q[2] = (m[0, 1] + m[1, 0]) / s
        q[3] = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2 * np.sqrt(1 + m[1, 1] - m[0, 0] - m[2, 2])
        q[0] = (m[0, 2] - m[2, 0]) / s
        q[1] = (m[0, 1] + m[1, 0]) / s
        q[2] = 0.25 * s
        q[3] = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2 * np.sqrt(1 + m[2, 2] - m[0, 0] - m[1, 1])
        q[0] = (m[1, 0] - m[0, 1]) / s
        q[1] = (m[0, 2] + m[2, 0]) / s
        q[2] = (m[1, 2] + m[2, 1]) / s
        q[3] = 0.25 * s
    q = q / np.sqrt(np.sum(np.square(q)))
    return _canonical_sign(q)


@njit("float64[:](float64[:], float64[:])", cache=True, nogil=True, fastmath=True)
def _quaternion_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Return the product ``q1 q2``, i.e. the rotation ``q2`` followed
    by ``q1``.
    """
    a1, b1, c1, d1 = q1
    a2, b2, c2, d2 = q2
    q = np.zeros(4, dtype=np.float64)
    q[0] = a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2
    q[1] = a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2
    q[2] = a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2
    q[3] = a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2
    return q


@njit("float64[:](float64[:], float64[:, :])", cache=True, nogil=True)
def _reduce_quaternion(q: np.ndarray, symmetry: np.ndarray) -> np.ndarray:
    """Return the canonical representative of ``s q`` over all
    symmetry operations ``s``.

    The representative has the largest scalar part, that is the
    smallest rotation angle. Ties are broken by the largest vector part
    compared lexicographically.
    """
    best = _canonical_sign(q)
    for i in range(symmetry.shape[0]):
        candidate = _canonical_sign(_quaternion_multiply(symmetry[i], q))
        if candidate[0] > best[0] + _EPS:
            best = candidate
        elif abs(candidate[0] - best[0]) <= _EPS:
            for j in range(1, 4):
                if candidate[j] > best[j] + _EPS:
                    best = candidate
                    break
                elif candidate[j] < best[j] - _EPS:
                    break
    return best


def _proper_symmetry_quaternions(symmetry) -> np.ndarray:
    """Return the unique proper rotations of a symmetry description as
    an array of shape (n, 4), always including the identity.

    Parameters
    ----------
    symmetry : orix.quaternion.Rotation, numpy.ndarray or None
        An orix :class:`~orix.quaternion.Symmetry` or
        :class:`~orix.quaternion.Rotation`, an array of quaternions of
        shape (n, 4) or an array of rotation matrices of shape
        (n, 3, 3). Improper operations are reduced to their rotation
        part. If None, only the identity is returned.

    Returns
    -------
    quaternions
        Unique quaternions with a canonical sign.
    """
    if symmetry is None:
        data = np.zeros((0, 4))
    elif hasattr(symmetry, "data") and not isinstance(symmetry, np.ndarray):
        data = np.asarray(symmetry.data, dtype=np.float64).reshape((-1, 4))
    else:
        arr = np.asarray(symmetry, dtype=np.float64)
        if arr.ndim == 3 and arr.shape[1:] == (3, 3):
            data = np.zeros((arr.shape[0], 4))
            for i, m in enumerate(arr):
                if np.linalg.det(m) < 0:
                    m = -m
                data[i] = _matrix_to_quaternion(np.ascontiguousarray(m))
        elif arr.ndim == 2 and arr.shape[1] == 4:
            data = arr
        elif arr.shape == (4,):
            data = arr[np.newaxis]
        else:
            raise InvalidInputError(
                "Symmetry must be given as quaternions of shape (n, 4) or "
                f"matrices of shape (n, 3, 3), not an array of shape {arr.shape}"
            )

    norms = np.linalg.norm(data, axis=1)
    if np.any(np.isclose(norms, 0)):
        raise InvalidInputError("Symmetry operations cannot be zero quaternions")
    data = data / norms[:, np.newaxis]

    unique = [np.array([1.0, 0, 0, 0])]
    for q in data:
        q = _canonical_sign(np.ascontiguousarray(q))
        if not any(np.allclose(q, u, atol=1e-8) for u in unique):
            unique.append(q)

    return np.array(unique)
