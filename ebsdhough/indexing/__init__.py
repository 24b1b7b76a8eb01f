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

"""Orientation indexing of EBSD patterns by matching interplanar angles
between pairs of Hough peaks to those between pairs of reflectors of
candidate phases.
"""

from ebsdhough.indexing.orientation_indexer import (
    OrientationIndexer,
    Solution,
    index,
)
from ebsdhough.indexing.pairs import Pair, PeakPairSet
from ebsdhough.indexing.phase import CandidatePhase, Reflector

__all__ = [
    "CandidatePhase",
    "OrientationIndexer",
    "Pair",
    "PeakPairSet",
    "Reflector",
    "Solution",
    "index",
]
