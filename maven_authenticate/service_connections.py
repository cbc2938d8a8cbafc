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

"""Service connections and the server entries generated from them.

A service connection describes an external package repository and the
credentials used to reach it. Connections are declared in a YAML catalog
and selected by name; the ``REPOSITORYID`` additional data entry names
the Maven server the credentials apply to.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from overrides import override
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from maven_authenticate import errors

from .servers import ServerEntry

REPOSITORY_ID = "REPOSITORYID"

logger = logging.getLogger(__name__)


class PackageSource(BaseModel):
    """The package repository a service connection points to."""

    model_config = ConfigDict(frozen=True)

    uri: str


class ServiceConnection(BaseModel):
    """A service connection with an unrecognized authentication type.

    Known authentication types are handled by subclasses; this class keeps
    whatever else was declared so the failure can be reported later.
    """

    model_config = ConfigDict(
        alias_generator=lambda s: s.replace("_", "-"),
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
        frozen=True,
    )

    credential_kind: ClassVar[str] = "unknown"

    name: str
    auth_type: str
    package_source: PackageSource
    additional_data: dict[str, str] = Field(default_factory=dict)

    @property
    def repository_id(self) -> str:
        """The id of the Maven server these credentials apply to."""
        return self.additional_data[REPOSITORY_ID]

    @classmethod
    def unmarshal(cls, data: dict[str, Any]) -> "ServiceConnection":
        """Create the service connection matching the declared auth type.

        :param data: A dictionary containing the service connection definition.

        :return: The populated service connection.
        """
        if not isinstance(data, dict):
            raise TypeError("service connection data is not a dictionary")

        auth_type = data.get("auth-type", data.get("auth_type"))
        connection_class = _CONNECTION_CLASSES.get(auth_type, cls)
        return connection_class.model_validate(data)

    def to_server_entry(self) -> ServerEntry:
        """Create the settings server entry for this connection."""
        raise errors.InvalidServiceConnection(self.package_source.uri)


class UsernamePasswordServiceConnection(ServiceConnection):
    """A service connection authenticated with a username and password."""

    model_config = ConfigDict(extra="forbid")

    credential_kind: ClassVar[str] = "username/password"

    auth_type: Literal["UsernamePassword"] = "UsernamePassword"
    username: str
    password: str

    @override
    def to_server_entry(self) -> ServerEntry:
        return ServerEntry(
            id=self.repository_id, username=self.username, password=self.password
        )


class TokenServiceConnection(ServiceConnection):
    """A service connection authenticated with an access token."""

    model_config = ConfigDict(extra="forbid")

    credential_kind: ClassVar[str] = "token"

    auth_type: Literal["Token"] = "Token"
    token: str

    @override
    def to_server_entry(self) -> ServerEntry:
        return ServerEntry.with_authorization_header(
            self.repository_id, f"Basic {self.token}"
        )


class PrivateKeyServiceConnection(ServiceConnection):
    """A service connection authenticated with a private key."""

    model_config = ConfigDict(extra="forbid")

    credential_kind: ClassVar[str] = "private key"

    auth_type: Literal["PrivateKey"] = "PrivateKey"
    private_key: str
    passphrase: str | None = None

    @override
    def to_server_entry(self) -> ServerEntry:
        return ServerEntry(
            id=self.repository_id,
            private_key=self.private_key,
            passphrase=self.passphrase,
        )


_CONNECTION_CLASSES: dict[Any, type[ServiceConnection]] = {
    "UsernamePassword": UsernamePasswordServiceConnection,
    "Token": TokenServiceConnection,
    "PrivateKey": PrivateKeyServiceConnection,
}


def load_service_connections(path: Path) -> list[ServiceConnection]:
    """Read the service connection catalog from a YAML file.

    :param path: The catalog file, with a top-level ``service-connections`` list.

    :return: The declared service connections, in file order.

    :raise ServiceConnectionSpecificationError: If a definition is invalid.
    """
    with path.open(encoding="utf-8") as catalog_file:
        data = yaml.safe_load(catalog_file) or {}

    if not isinstance(data, dict):
        raise errors.ServiceConnectionSpecificationError(
            "- the catalog must be a mapping with a 'service-connections' key"
        )

    records = data.get("service-connections") or []
    if not isinstance(records, list):
        raise errors.ServiceConnectionSpecificationError(
            "- 'service-connections' must be a list"
        )

    connections: list[ServiceConnection] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise errors.ServiceConnectionSpecificationError(
                f"- service-connections[{index}] must be a mapping"
            )
        try:
            connections.append(ServiceConnection.unmarshal(record))
        except ValidationError as err:
            raise errors.ServiceConnectionSpecificationError.from_validation_error(
                error_list=err.errors(), index=index
            ) from err

    logger.debug("Loaded %d service connections from %s", len(connections), path)
    return connections


def get_packaging_service_connections(
    names: Iterable[str],
    catalog: Iterable[ServiceConnection],
    required_additional_data: Sequence[str] = (REPOSITORY_ID,),
) -> list[ServiceConnection]:
    """Select the named service connections from a catalog.

    :param names: The names of the connections to use, in order.
    :param catalog: All declared service connections.
    :param required_additional_data: Keys every selected connection must define.

    :return: The selected service connections.

    :raise ServiceConnectionNotFound: If a name is not in the catalog.
    :raise MissingAdditionalData: If a required key is absent.
    """
    connections_by_name = {connection.name: connection for connection in catalog}

    selected: list[ServiceConnection] = []
    for name in names:
        connection = connections_by_name.get(name)
        if connection is None:
            raise errors.ServiceConnectionNotFound(name)

        for key in required_additional_data:
            if not connection.additional_data.get(key):
                raise errors.MissingAdditionalData(name=name, key=key)

        selected.append(connection)

    return selected


def get_external_service_endpoints_server_elements(
    connections: Iterable[ServiceConnection] | None,
) -> list[ServerEntry]:
    """Create a server entry for each service connection.

    :param connections: The resolved service connections.

    :return: The server entries, one per connection, in order.

    :raise InvalidServiceConnection: If a connection's authentication type
        is not supported.
    """
    resolved = list(connections) if connections else []
    if not resolved:
        return []

    logger.info("Generating %d external repository server entries", len(resolved))

    server_entries: list[ServerEntry] = []
    for connection in resolved:
        server_entries.append(connection.to_server_entry())
        logger.debug(
            "Detected %s credentials for %r",
            connection.credential_kind,
            connection.package_source.uri,
        )

    return server_entries
