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

"""Maven authentication command line tool.

This is the main entry point for the maven_authenticate package, invoked
when running `python -mmaven_authenticate`. It adds server credentials
for internal feeds and external service connections to a Maven settings
file.
"""

import argparse
import logging
import sys
from pathlib import Path
from xml.parsers.expat import ExpatError

import yaml

import maven_authenticate
import maven_authenticate.errors
from maven_authenticate import feeds, service_connections, settings

logger = logging.getLogger(__name__)


def main():
    """Run the command-line interface."""
    options = _parse_arguments()

    if options.version:
        print(f"maven-authenticate {maven_authenticate.__version__}")
        sys.exit()

    if options.trace:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(level=log_level)

    try:
        _authenticate(options)
    except OSError as err:
        msg = err.strerror
        if err.filename:
            msg = f"{err.filename}: {msg}"
        print(f"Error: {msg}.", file=sys.stderr)
        sys.exit(1)
    except maven_authenticate.errors.ServiceConnectionSpecificationError as err:
        print(f"Error: invalid service connections: {err}", file=sys.stderr)
        sys.exit(2)
    except maven_authenticate.errors.MavenAuthenticateError as err:
        print(f"Error: {err}", file=sys.stderr)
        sys.exit(3)
    except (ExpatError, yaml.YAMLError) as err:
        print(f"Error: unable to parse file: {err}", file=sys.stderr)
        sys.exit(4)


def _authenticate(options: argparse.Namespace) -> None:
    feed_ids = feeds.split_delimited(options.feeds)
    server_entries = feeds.get_internal_feeds_server_elements(feed_ids)

    connection_names = feeds.split_delimited(options.service_connections)
    if connection_names:
        catalog = service_connections.load_service_connections(
            Path(options.service_connections_file)
        )
        connections = service_connections.get_packaging_service_connections(
            connection_names, catalog
        )
        server_entries.extend(
            service_connections.get_external_service_endpoints_server_elements(
                connections
            )
        )

    if not server_entries:
        logger.warning("No feeds or service connections to authenticate.")
        return

    settings_path = Path(options.settings).expanduser()
    settings.update_settings_file(settings_path, server_entries)


def _parse_arguments() -> argparse.Namespace:
    prog = "python -m maven_authenticate"
    description = (
        "Add credentials for internal feeds and external repositories "
        "to a Maven settings file."
    )

    parser = argparse.ArgumentParser(prog=prog, description=description, add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action="help",
        default=argparse.SUPPRESS,
        help="Show this help message and exit.",
    )
    parser.add_argument(
        "--feeds",
        metavar="list",
        default="",
        help="Comma-separated internal feed ids to authenticate.",
    )
    parser.add_argument(
        "--service-connections",
        metavar="list",
        default="",
        help="Comma-separated names of the service connections to authenticate.",
    )
    parser.add_argument(
        "--service-connections-file",
        metavar="filename",
        default="service-connections.yaml",
        help=(
            "The service connection definitions. "
            "Default is 'service-connections.yaml'."
        ),
    )
    parser.add_argument(
        "-s",
        "--settings",
        metavar="filename",
        default="~/.m2/settings.xml",
        help="The Maven settings file to update. Default is '~/.m2/settings.xml'.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Display the maven-authenticate version and exit.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable debug messages.",
    )
    return parser.parse_args()
