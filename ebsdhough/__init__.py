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

from typing import Union

from ebsdhough.release import version as __version__


def set_log_level(level: Union[int, str]):  # pragma: no cover
    """Set level of ebsdhough logging messages.

    Parameters
    ----------
    level
        Any value accepted by :meth:`logging.Logger.setLevel()`. Levels
        are ``"DEBUG"``, ``"INFO"``, ``"WARNING"``, ``"ERROR"`` and
        ``"CRITICAL"``.

    Notes
    -----
    See https://docs.python.org/3/howto/logging.html.

    Examples
    --------
    Note that you might have to set the logging level of the root stream
    handler to display ebsdhough's debug messages, as this handler might
    have been initialized by another package

    >>> import logging
    >>> logging.root.handlers[0]  # doctest: +SKIP
    <StreamHandler <stderr> (INFO)>
    >>> logging.root.handlers[0].setLevel("DEBUG")  # doctest: +SKIP

    >>> import ebsdhough as eh
    >>> eh.set_log_level("DEBUG")  # doctest: +SKIP
    >>> indexer = eh.indexing.OrientationIndexer()
    >>> solutions = indexer.index(phases, peaks, camera)  # doctest: +SKIP
    DEBUG:ebsdhough.indexing.orientation_indexer:....Inspecting match Pair ...
    """
    import logging

    logging.basicConfig()
    logging.getLogger("ebsdhough").setLevel(level)


__all__ = [
    "__version__",
    "constants",
    "geometry",
    "hough",
    "hough_transform",
    "index",
    "indexing",
    "release",
    "set_log_level",
]


def __dir__():
    return sorted(__all__)


def __getattr__(name):
    _import_mapping = {
        "hough_transform": "hough.transform",
        "index": "indexing.orientation_indexer",
    }
    if name in __all__:
        import importlib

        if name in _import_mapping.keys():
            import_path = f"{__name__}.{_import_mapping.get(name)}"
            return getattr(importlib.import_module(import_path), name)
        else:  # pragma: no cover
            return importlib.import_module("." + name, __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
