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


import logging
from pathlib import Path

import pytest

from maven_authenticate import errors
from maven_authenticate.service_connections import (
    PrivateKeyServiceConnection,
    ServiceConnection,
    TokenServiceConnection,
    UsernamePasswordServiceConnection,
    get_external_service_endpoints_server_elements,
    get_packaging_service_connections,
    load_service_connections,
)


def _connection_data(**kwargs) -> dict:
    data = {
        "name": "my-connection",
        "package-source": {"uri": "https://repo.example.com"},
        "additional-data": {"REPOSITORYID": "repo1"},
    }
    data.update(kwargs)
    return data


class TestUnmarshal:
    """Service connections are created according to their auth type."""

    def test_username_password(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(
                **{"auth-type": "UsernamePassword", "username": "u", "password": "p"}
            )
        )
        assert isinstance(connection, UsernamePasswordServiceConnection)
        assert connection.username == "u"
        assert connection.password == "p"
        assert connection.repository_id == "repo1"
        assert connection.package_source.uri == "https://repo.example.com"

    def test_token(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(**{"auth-type": "Token", "token": "abc"})
        )
        assert isinstance(connection, TokenServiceConnection)
        assert connection.token == "abc"

    def test_private_key(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(
                **{"auth-type": "PrivateKey", "private-key": "KEY", "passphrase": "PASS"}
            )
        )
        assert isinstance(connection, PrivateKeyServiceConnection)
        assert connection.private_key == "KEY"
        assert connection.passphrase == "PASS"

    def test_underscore_keys(self):
        connection = ServiceConnection.unmarshal(
            {
                "name": "my-connection",
                "auth_type": "Token",
                "package_source": {"uri": "https://repo.example.com"},
                "token": "abc",
            }
        )
        assert isinstance(connection, TokenServiceConnection)

    def test_unknown_auth_type(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(**{"auth-type": "Certificate", "certificate": "CERT"})
        )
        assert type(connection) is ServiceConnection
        assert connection.auth_type == "Certificate"

    def test_missing_credentials(self):
        with pytest.raises(ValueError, match="token"):
            ServiceConnection.unmarshal(_connection_data(**{"auth-type": "Token"}))

    def test_extra_field_not_permitted(self):
        with pytest.raises(ValueError, match="username"):
            ServiceConnection.unmarshal(
                _connection_data(**{"auth-type": "Token", "token": "a", "username": "u"})
            )

    def test_not_a_dict(self):
        with pytest.raises(TypeError, match="not a dictionary"):
            ServiceConnection.unmarshal("token")  # type: ignore[arg-type]


class TestServerEntries:
    """Each authentication type maps to its own credentials."""

    def test_username_password(self):
        connection = UsernamePasswordServiceConnection.unmarshal(
            _connection_data(
                **{"auth-type": "UsernamePassword", "username": "u", "password": "p"}
            )
        )
        assert connection.to_server_entry().marshal() == {
            "id": "repo1",
            "username": "u",
            "password": "p",
        }

    def test_token(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(**{"auth-type": "Token", "token": "abc"})
        )
        assert connection.to_server_entry().marshal() == {
            "id": "repo1",
            "configuration": {
                "httpHeaders": {
                    "property": {"name": "Authorization", "value": "Basic abc"}
                }
            },
        }

    def test_private_key(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(
                **{"auth-type": "PrivateKey", "private-key": "KEY", "passphrase": "PASS"}
            )
        )
        assert connection.to_server_entry().marshal() == {
            "id": "repo1",
            "privateKey": "KEY",
            "passphrase": "PASS",
        }

    def test_unknown_auth_type(self):
        connection = ServiceConnection.unmarshal(
            _connection_data(**{"auth-type": "Certificate"})
        )
        with pytest.raises(errors.InvalidServiceConnection) as raised:
            connection.to_server_entry()
        assert raised.value.uri == "https://repo.example.com"


def test_get_external_service_endpoints_server_elements(caplog):
    caplog.set_level(logging.DEBUG, logger="maven_authenticate")
    connections = [
        ServiceConnection.unmarshal(
            _connection_data(
                **{
                    "auth-type": "UsernamePassword",
                    "username": "u",
                    "password": "p",
                    "additional-data": {"REPOSITORYID": "first"},
                }
            )
        ),
        ServiceConnection.unmarshal(
            _connection_data(
                **{
                    "auth-type": "PrivateKey",
                    "private-key": "KEY",
                    "package-source": {"uri": "https://keys.example.com"},
                    "additional-data": {"REPOSITORYID": "second"},
                }
            )
        ),
    ]

    entries = get_external_service_endpoints_server_elements(connections)

    assert [entry.id for entry in entries] == ["first", "second"]
    assert entries[0].username == "u"
    assert entries[1].private_key == "KEY"
    assert "Generating 2 external repository server entries" in caplog.text
    assert (
        "Detected username/password credentials for 'https://repo.example.com'"
        in caplog.text
    )
    assert (
        "Detected private key credentials for 'https://keys.example.com'"
        in caplog.text
    )


@pytest.mark.parametrize("connections", [None, []])
def test_get_external_service_endpoints_server_elements_empty(connections):
    assert get_external_service_endpoints_server_elements(connections) == []


def test_get_external_service_endpoints_server_elements_invalid():
    connections = [
        ServiceConnection.unmarshal(
            _connection_data(**{"auth-type": "Token", "token": "abc"})
        ),
        ServiceConnection.unmarshal(
            _connection_data(
                **{
                    "auth-type": "Certificate",
                    "package-source": {"uri": "https://legacy.example.com"},
                }
            )
        ),
    ]

    with pytest.raises(errors.InvalidServiceConnection) as raised:
        get_external_service_endpoints_server_elements(connections)
    assert "'https://legacy.example.com'" in str(raised.value)


class TestLoadServiceConnections:
    """Read the service connection catalog."""

    def test_load(self, service_connections_file: Path):
        connections = load_service_connections(service_connections_file)

        assert [c.name for c in connections] == [
            "central-mirror",
            "token-repo",
            "deploy-key",
            "legacy",
            "no-repository-id",
        ]
        assert [type(c) for c in connections] == [
            UsernamePasswordServiceConnection,
            TokenServiceConnection,
            PrivateKeyServiceConnection,
            ServiceConnection,
            TokenServiceConnection,
        ]

    @pytest.mark.parametrize("content", ["", "service-connections:\n"])
    def test_load_empty(self, new_path: Path, content: str):
        path = new_path / "connections.yaml"
        path.write_text(content)

        assert load_service_connections(path) == []

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            pytest.param("- a\n- b\n", "must be a mapping with", id="list"),
            pytest.param("service-connections: foo\n", "must be a list", id="not-list"),
            pytest.param("service-connections: [foo]\n", r"\[0\] must be a mapping", id="item"),
        ],
    )
    def test_load_invalid_structure(self, new_path: Path, content: str, message: str):
        path = new_path / "connections.yaml"
        path.write_text(content)

        with pytest.raises(errors.ServiceConnectionSpecificationError, match=message):
            load_service_connections(path)

    def test_load_invalid_record(self, new_path: Path):
        path = new_path / "connections.yaml"
        path.write_text(
            "service-connections:\n"
            "  - name: ok\n"
            "    auth-type: Token\n"
            "    package-source: {uri: https://ok.example.com}\n"
            "    token: abc\n"
            "  - name: broken\n"
            "    auth-type: Token\n"
            "    package-source: {uri: https://broken.example.com}\n"
        )

        with pytest.raises(errors.ServiceConnectionSpecificationError) as raised:
            load_service_connections(path)
        assert raised.value.details == (
            "- field 'service-connections[1].token' is required"
        )

    def test_load_numeric_values(self, new_path: Path):
        path = new_path / "connections.yaml"
        path.write_text(
            "service-connections:\n"
            "  - name: nexus\n"
            "    auth-type: UsernamePassword\n"
            "    package-source: {uri: https://nexus.example.com}\n"
            "    additional-data: {REPOSITORYID: 2024}\n"
            "    username: 1001\n"
            "    password: 123456\n"
            "  - name: key\n"
            "    auth-type: PrivateKey\n"
            "    package-source: {uri: https://keys.example.com}\n"
            "    additional-data: {REPOSITORYID: 7}\n"
            "    private-key: KEY\n"
            "    passphrase: 4321\n"
        )

        connections = load_service_connections(path)

        assert [c.to_server_entry().marshal() for c in connections] == [
            {"id": "2024", "username": "1001", "password": "123456"},
            {"id": "7", "privateKey": "KEY", "passphrase": "4321"},
        ]

    def test_load_missing_file(self, new_path: Path):
        with pytest.raises(FileNotFoundError):
            load_service_connections(new_path / "missing.yaml")


class TestGetPackagingServiceConnections:
    """Select service connections by name."""

    def test_select_in_order(self, service_connections_file: Path):
        catalog = load_service_connections(service_connections_file)

        selected = get_packaging_service_connections(
            ["deploy-key", "central-mirror"], catalog
        )

        assert [c.name for c in selected] == ["deploy-key", "central-mirror"]

    def test_not_found(self, service_connections_file: Path):
        catalog = load_service_connections(service_connections_file)

        with pytest.raises(errors.ServiceConnectionNotFound) as raised:
            get_packaging_service_connections(["central-mirror", "missing"], catalog)
        assert raised.value.name == "missing"

    def test_missing_repository_id(self, service_connections_file: Path):
        catalog = load_service_connections(service_connections_file)

        with pytest.raises(errors.MissingAdditionalData) as raised:
            get_packaging_service_connections(["no-repository-id"], catalog)
        assert raised.value.name == "no-repository-id"
        assert raised.value.key == "REPOSITORYID"

    def test_no_required_data(self, service_connections_file: Path):
        catalog = load_service_connections(service_connections_file)

        selected = get_packaging_service_connections(
            ["no-repository-id"], catalog, required_additional_data=()
        )

        assert [c.name for c in selected] == ["no-repository-id"]


def test_private_key_scenario(service_connections_file: Path):
    catalog = load_service_connections(service_connections_file)
    connections = get_packaging_service_connections(["deploy-key"], catalog)

    (entry,) = get_external_service_endpoints_server_elements(connections)

    assert entry.marshal() == {"id": "repo1", "privateKey": "KEY", "passphrase": "PASS"}
