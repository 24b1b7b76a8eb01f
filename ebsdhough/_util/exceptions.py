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

from typing import Any


class InvalidInputError(ValueError):
    """Raised when a required argument is missing or has an invalid
    value, or when two objects expected to align do not.
    """


class OutOfRangeError(InvalidInputError):
    def __init__(
        self, name: str, given: Any = None, lower: Any = None, upper: Any = None
    ) -> None:
        msg = f"{name}"
        if given is not None:
            msg += f" ({given!r})"
        msg += " is outside the calibrated range"
        if lower is not None and upper is not None:
            msg += f" [{lower!r}, {upper!r}]"
        super().__init__(msg)


class DegenerateValueError(InvalidInputError):
    def __init__(self, name: str, given: Any = None) -> None:
        if given is None:
            msg = f"{name} is degenerate"
        else:
            msg = f"{name} cannot be {given}"
        super().__init__(msg)
