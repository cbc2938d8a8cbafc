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

"""Add repository credentials to Maven settings files."""

from importlib.metadata import PackageNotFoundError, version

from .errors import MavenAuthenticateError
from .feeds import get_internal_feeds_server_elements, split_delimited
from .servers import ServerEntry
from .service_connections import (
    ServiceConnection,
    get_external_service_endpoints_server_elements,
    get_packaging_service_connections,
    load_service_connections,
)
from .settings import (
    insert_server,
    read_settings_file,
    update_settings_file,
    write_settings_file,
)

try:
    __version__ = version("maven_authenticate")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "dev"


__all__ = [
    "__version__",
    "MavenAuthenticateError",
    "ServerEntry",
    "ServiceConnection",
    "get_internal_feeds_server_elements",
    "get_external_service_endpoints_server_elements",
    "get_packaging_service_connections",
    "insert_server",
    "load_service_connections",
    "read_settings_file",
    "split_delimited",
    "update_settings_file",
    "write_settings_file",
]
