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

"""Hough transform of EBSD patterns into Hough maps, and the peaks
found in them.
"""

from ebsdhough.hough.hough_map import HoughMap, calculate_height, calculate_width
from ebsdhough.hough.hough_peak import HoughPeak
from ebsdhough.hough.transform import (
    HoughTransform,
    calculate_delta_rho,
    hough_transform,
)

__all__ = [
    "HoughMap",
    "HoughPeak",
    "HoughTransform",
    "calculate_delta_rho",
    "calculate_height",
    "calculate_width",
    "hough_transform",
]
