# -*- Mode:Python; indent-tabs-mode:nil; tab-width:4 -*-
#
# Copyright 2025 Canonical Ltd.
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License version 3 as published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""Maven authentication errors."""

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


@dataclasses.dataclass(repr=True)
class MavenAuthenticateError(Exception):
    """Unexpected error.

    :param brief: Brief description of error.
    :param details: Detailed information.
    :param resolution: Recommendation, if any.
    """

    brief: str
    details: str | None = None
    resolution: str | None = None

    def __str__(self) -> str:
        components = [self.brief]

        if self.details:
            components.append(self.details)

        if self.resolution:
            components.append(self.resolution)

        return "\n".join(components)


class InvalidServiceConnection(MavenAuthenticateError):
    """The service connection uses an authentication scheme we can't map.

    :param uri: The package source URI of the offending connection.
    """

    def __init__(self, uri: str):
        self.uri = uri
        brief = f"Service connection for {uri!r} has an invalid authentication type."
        resolution = (
            "Use a username/password, token or private key service connection."
        )

        super().__init__(brief=brief, resolution=resolution)


class ServiceConnectionNotFound(MavenAuthenticateError):
    """A requested service connection is not defined.

    :param name: The name of the missing service connection.
    """

    def __init__(self, name: str):
        self.name = name
        brief = f"Service connection {name!r} is not defined."
        resolution = "Make sure the service connection name is correct."

        super().__init__(brief=brief, resolution=resolution)


class MissingAdditionalData(MavenAuthenticateError):
    """A service connection lacks a required additional data entry.

    :param name: The name of the service connection.
    :param key: The missing additional data key.
    """

    def __init__(self, *, name: str, key: str):
        self.name = name
        self.key = key
        brief = f"Service connection {name!r} has no {key!r} additional data."
        resolution = f"Add {key!r} to the service connection's additional data."

        super().__init__(brief=brief, resolution=resolution)


class ServiceConnectionSpecificationError(MavenAuthenticateError):
    """A service connection was not correctly specified.

    :param message: The error message.
    """

    def __init__(self, message: str):
        self.message = message
        brief = "Service connection validation failed."
        details = message
        resolution = "Review the service connection definitions."

        super().__init__(brief=brief, details=details, resolution=resolution)

    @classmethod
    def from_validation_error(
        cls, *, error_list: "list[ErrorDetails]", index: int | None = None
    ) -> "ServiceConnectionSpecificationError":
        """Create a ServiceConnectionSpecificationError from a pydantic error list.

        :param error_list: A list of dictionaries containing pydantic error definitions.
        :param index: The position of the offending record in the catalog.
        """
        formatted_errors: list[str] = []

        for error in error_list:
            loc = error.get("loc")
            msg = error.get("msg")

            if not (loc and msg) or not isinstance(loc, tuple):
                continue

            field = cls._format_loc(loc)
            if index is not None:
                field = f"service-connections[{index}].{field}"
            if error.get("type") == "missing":
                formatted_errors.append(f"- field {field!r} is required")
            elif error.get("type") == "extra_forbidden":
                formatted_errors.append(f"- extra field {field!r} not permitted")
            else:
                formatted_errors.append(f"- {msg} in field {field!r}")

        return cls(message="\n".join(formatted_errors))

    @classmethod
    def _format_loc(cls, loc: tuple) -> str:
        """Format location."""
        loc_parts: list[str] = []
        for loc_part in loc:
            if isinstance(loc_part, str):
                loc_parts.append(loc_part)
            elif isinstance(loc_part, int):
                # Integer indicates an index. Go back and fix up previous part.
                previous_part = loc_parts.pop()
                previous_part += f"[{loc_part}]"
                loc_parts.append(previous_part)
            else:
                raise RuntimeError(f"unhandled loc: {loc_part}")

        return ".".join(loc_parts)
