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

"""Camera geometry and conversions between Hough peaks, lines in the
pattern and diffraction plane normals.
"""

from ebsdhough.geometry.camera import Camera
from ebsdhough.geometry.hough_math import (
    fit,
    line_to_peak,
    normal_to_peak,
    peak_to_line,
    peak_to_normal,
    peaks_to_normals,
)

__all__ = [
    "Camera",
    "fit",
    "line_to_peak",
    "normal_to_peak",
    "peak_to_line",
    "peak_to_normal",
    "peaks_to_normals",
]
