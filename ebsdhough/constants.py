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

"""Default values used across modules.

All of these can be overridden per call through keyword arguments.
"""

# ----------------------------- Hough map ---------------------------- #

#: Units of the distance (rho) axis of a Hough map when the pattern
#: does not carry any.
DEFAULT_RHO_UNITS = "px"

#: Pattern property holding the radius of the circular mask applied to
#: the pattern. Used to compute the distance resolution automatically.
MASK_RADIUS_KEY = "mask_radius"

#: Pattern property holding the units of the pattern calibration.
UNITS_KEY = "units"

# ---------------------------- Transform ----------------------------- #

#: Number of pattern pixels scanned between two checks of the
#: interruption flag.
INTERRUPT_CHECK_INTERVAL = 10

#: Band width limits, as fractions of the mask radius, over which the
#: peak aspect ratio is averaged.
BAND_WIDTH_FRACTIONS = (0.01, 0.25)

#: Peak position limits, as fractions of the mask radius, over which the
#: peak aspect ratio is averaged.
RHO_FRACTIONS = (-0.9, 0.9)

# ----------------------------- Indexing ----------------------------- #

#: Reflector pairs closer than this to a direction cosine of 1 are
#: considered parallel and discarded.
PARALLEL_TOLERANCE = 1e-7

#: Tolerance on the direction cosine when matching the experimental
#: reference pair against theoretical pairs.
DIRECTION_COSINE_TOLERANCE = 0.1

#: Precision at which quaternions are quantized to build the key used
#: to deduplicate solutions.
KEY_PRECISION = 1e-6

#: Minimum number of Hough peaks required for indexing.
MIN_PEAKS = 3
