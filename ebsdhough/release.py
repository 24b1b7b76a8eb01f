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

from datetime import datetime


author = "ebsdhough developers"
copyright = f"Copyright 2019-{datetime.now().year}, ebsdhough"
credits = [
    "Philippe T. Pinard",
    "Marin Lagacé",
]
license = "GPLv3+"
maintainer = "ebsdhough developers"
maintainer_email = ""
name = "ebsdhough"
platforms = ["Linux", "MacOS X", "Windows"]
status = "Development"
version = "0.1.0"
