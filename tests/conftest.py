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

from pathlib import Path
from textwrap import dedent

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Use collection hook to mark all integration tests as slow"""
    for item in items:
        if "tests/integration" in str(item.path):
            item.add_marker(pytest.mark.slow)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: the test exercises the whole tool")


@pytest.fixture
def new_path(monkeypatch, tmp_path):
    """Change to a new temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def service_connections_yaml() -> str:
    return dedent(
        """\
        service-connections:
          - name: central-mirror
            auth-type: UsernamePassword
            package-source:
              uri: https://repo.example.com/maven2
            additional-data:
              REPOSITORYID: central-mirror
            username: builder
            password: s3cret
          - name: token-repo
            auth-type: Token
            package-source:
              uri: https://token.example.com
            additional-data:
              REPOSITORYID: token-repo
            token: dG9rZW4=
          - name: deploy-key
            auth-type: PrivateKey
            package-source:
              uri: https://deploy.example.com
            additional-data:
              REPOSITORYID: repo1
            private-key: KEY
            passphrase: PASS
          - name: legacy
            auth-type: Certificate
            package-source:
              uri: https://legacy.example.com
            additional-data:
              REPOSITORYID: legacy
            certificate: CERT
          - name: no-repository-id
            auth-type: Token
            package-source:
              uri: https://anonymous.example.com
            token: abc
        """
    )


@pytest.fixture
def service_connections_file(new_path: Path, service_connections_yaml: str) -> Path:
    path = new_path / "service-connections.yaml"
    path.write_text(service_connections_yaml)
    return path
