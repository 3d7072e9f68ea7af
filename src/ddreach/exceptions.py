# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Exceptions raised by set construction, the system catalog and noise lifting.

All errors are raised synchronously and are never retried: every operation
in this package is a pure function of its inputs.
"""

from typing import Iterable, Optional


class UnknownSystemError(LookupError):
    """Raised when an identifier is not registered in the system catalog"""

    def __init__(self, identifier: str, known: Iterable[str] = ()):
        self.identifier = identifier
        self.known = tuple(sorted(known))
        message = f"Unknown system '{identifier}'"
        if self.known:
            message += f". Available systems: {', '.join(self.known)}"
        super().__init__(message)

    def __str__(self) -> str:
        # LookupError would otherwise repr() the message like KeyError does
        return self.args[0]

    def __reduce__(self):
        return type(self), (self.identifier, self.known)


class UnsupportedModeError(ValueError):
    """Raised when an uncertainty mode is invalid or not defined by an entry"""

    def __init__(self, mode: str, identifier: Optional[str] = None, message: Optional[str] = None):
        self.mode = mode
        self.identifier = identifier
        if message is None:
            if identifier is None:
                message = f"Unsupported uncertainty mode '{mode}'"
            else:
                message = (
                    f"System '{identifier}' does not define uncertainty sets for mode '{mode}'"
                )
        super().__init__(message)

    def __reduce__(self):
        return type(self), (self.mode, self.identifier, self.args[0])


class DimensionMismatchError(ValueError):
    """Raised when centers, generators, matrices or sets disagree in shape"""
    pass


class InvalidTrajectoryLengthError(ValueError):
    """Raised when a negative horizon is passed to noise lifting"""
    pass


__all__ = [
    "UnknownSystemError",
    "UnsupportedModeError",
    "DimensionMismatchError",
    "InvalidTrajectoryLengthError",
]
