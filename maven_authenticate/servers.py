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

"""Definitions of Maven settings server entries."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Self

AUTHORIZATION_HEADER = "Authorization"


class _SettingsModel(BaseModel):
    """Base for models that map onto settings.xml elements."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class HttpHeaderProperty(_SettingsModel):
    """A single HTTP header sent by Maven to the server."""

    name: str
    value: str


class HttpHeaders(_SettingsModel):
    """The ``httpHeaders`` block of a server configuration."""

    property: HttpHeaderProperty


class ServerConfiguration(_SettingsModel):
    """The ``configuration`` block of a server entry."""

    http_headers: HttpHeaders


class ServerEntry(_SettingsModel):
    """A ``<server>`` element in Maven's settings file.

    An entry carries its id and exactly one kind of credentials: an
    authorization header, a username and password, or a private key.
    """

    id: str
    username: str | None = None
    password: str | None = None
    private_key: str | None = None
    passphrase: str | None = None
    configuration: ServerConfiguration | None = None

    @model_validator(mode="after")
    def _validate_single_credential_shape(self) -> Self:
        shapes = [
            self.username is not None or self.password is not None,
            self.private_key is not None or self.passphrase is not None,
            self.configuration is not None,
        ]
        if shapes.count(True) != 1:
            raise ValueError(
                f"server {self.id!r} must define exactly one kind of credentials"
            )
        return self

    @classmethod
    def with_authorization_header(cls, server_id: str, value: str) -> Self:
        """Create an entry that authenticates with an ``Authorization`` header."""
        header = HttpHeaderProperty(name=AUTHORIZATION_HEADER, value=value)
        return cls(
            id=server_id,
            configuration=ServerConfiguration(
                http_headers=HttpHeaders(property=header)
            ),
        )

    def marshal(self) -> dict[str, Any]:
        """Obtain the settings document representation of this entry."""
        return self.model_dump(by_alias=True, exclude_none=True)
