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

import pytest

from ebsdhough._util.exceptions import (
    DegenerateValueError,
    InvalidInputError,
    OutOfRangeError,
)


class TestExceptions:
    def test_out_of_range_error(self):
        with pytest.raises(
            OutOfRangeError,
            match=r"Rho \(12.0\) is outside the calibrated range \[-10.5, 10.5\]",
        ):
            raise OutOfRangeError("Rho", 12.0, -10.5, 10.5)

    def test_out_of_range_error_no_limits(self):
        with pytest.raises(OutOfRangeError, match="^Theta is outside the calibrated"):
            raise OutOfRangeError("Theta")

    def test_degenerate_value_error(self):
        with pytest.raises(DegenerateValueError, match="Rho cannot be nan"):
            raise DegenerateValueError("Rho", float("nan"))
        with pytest.raises(DegenerateValueError, match="Plane normal is degenerate"):
            raise DegenerateValueError("Plane normal")

    def test_hierarchy(self):
        assert issubclass(OutOfRangeError, InvalidInputError)
        assert issubclass(DegenerateValueError, InvalidInputError)
        assert issubclass(InvalidInputError, ValueError)
