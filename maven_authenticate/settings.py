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

"""Read, update and write Maven settings files.

The settings file is handled as a tree of dictionaries. Element
attributes are kept in a ``$`` dictionary and the text of an element
that also has attributes is kept under ``_``. A child element that
appears once is a single value, and one that repeats is a list.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import xmltodict

from .servers import ServerEntry

SETTINGS_NAMESPACES = {
    "xmlns": "http://maven.apache.org/SETTINGS/1.0.0",
    "xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "xsi:schemaLocation": (
        "http://maven.apache.org/SETTINGS/1.0.0 "
        "https://maven.apache.org/xsd/settings-1.0.0.xsd"
    ),
}

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"

_XML_ATTR_PREFIX = "@"
_XML_TEXT_KEY = "#text"
_CARRIAGE_RETURN_REFS = re.compile(r"&#(?:xD|13);")

logger = logging.getLogger(__name__)


def insert_server(
    document: dict[str, Any] | None, server: ServerEntry | dict[str, Any]
) -> dict[str, Any]:
    """Add a server entry to a settings document.

    The settings namespace attributes are added if missing. An entry whose
    id is already present is not added.

    :param document: The settings document, updated in place.
    :param server: The server entry to add.

    :return: The updated settings document.
    """
    if not isinstance(document, dict):
        document = {}

    settings = document.get("settings")
    if not isinstance(settings, dict):
        settings = document["settings"] = {}

    attributes = settings.get(ATTRIBUTES_KEY)
    if not isinstance(attributes, dict):
        attributes = settings[ATTRIBUTES_KEY] = {}
    for name, value in SETTINGS_NAMESPACES.items():
        attributes.setdefault(name, value)

    servers = settings.get("servers")
    if not isinstance(servers, (dict, list)):
        servers = settings["servers"] = {}

    entry = server.marshal() if isinstance(server, ServerEntry) else server
    add_child(servers, "server", entry)

    return document


def add_child(parent: dict[str, Any] | list[Any], name: str, value: Any) -> bool:
    """Add a child node unless a child with the same id already exists.

    :param parent: The node to add to. If it is a list, the child is added
        to the first element that already holds ``name``.
    :param name: The child node name.
    :param value: The child node to add.

    :return: Whether the child was added.
    """
    if isinstance(parent, list):
        holder = next(
            (node for node in parent if isinstance(node, dict) and name in node), None
        )
        if holder is not None:
            parent = holder

    if isinstance(parent, dict) and name in parent:
        existing = parent[name]
        siblings = existing if isinstance(existing, list) else [existing]
        if _contains_id(siblings, value):
            _warn_entry_exists(value)
            return False

        if isinstance(existing, list):
            existing.append(value)
        else:
            parent[name] = [existing, value]
        return True

    if isinstance(parent, list):
        if _contains_id(parent, value):
            _warn_entry_exists(value)
            return False

        parent.append({name: value})
        return True

    parent[name] = value
    return True


def get_servers(document: dict[str, Any] | None) -> list[Any]:
    """Return every server node in a settings document, in document order."""
    if not isinstance(document, dict):
        return []

    settings = document.get("settings")
    if not isinstance(settings, dict):
        return []

    containers = settings.get("servers")
    if not isinstance(containers, list):
        containers = [containers]

    servers: list[Any] = []
    for container in containers:
        if not isinstance(container, dict):
            continue
        value = container.get("server")
        nodes = value if isinstance(value, list) else [value]
        servers.extend(node for node in nodes if node is not None)

    return servers


def _contains_id(nodes: Iterable[Any], value: Any) -> bool:
    value_id = value.get("id") if isinstance(value, dict) else None
    if not value_id:
        return False

    for node in nodes:
        if not isinstance(node, dict):
            continue
        node_id = node.get("id")
        if isinstance(node_id, list):
            if value_id in node_id:
                return True
        elif node_id == value_id:
            return True

    return False


def _warn_entry_exists(value: dict[str, Any]) -> None:
    logger.warning(
        "Feed entry %r already exists in the settings file, skipping.", value["id"]
    )


def read_settings_file(path: Path) -> dict[str, Any]:
    """Read a settings file into a settings document.

    :param path: The settings file to read.

    :return: The settings document. Server nodes are always loaded as a list.
    """
    # utf-8-sig drops a leading byte order mark
    return parse_settings(path.read_text(encoding="utf-8-sig"))


def parse_settings(xml_content: str) -> dict[str, Any]:
    """Convert settings XML text into a settings document."""
    parsed = xmltodict.parse(xml_content, force_list=("server",))
    return _from_xml_node(parsed)


def build_settings(document: dict[str, Any] | None) -> str:
    """Convert a settings document into settings XML text.

    The text is indented, has ``settings`` as its root element and no XML
    declaration.
    """
    settings = document.get("settings") if isinstance(document, dict) else None
    xml_content = xmltodict.unparse(
        {"settings": _to_xml_node(settings)},
        full_document=False,
        pretty=True,
        indent="  ",
    )
    return _CARRIAGE_RETURN_REFS.sub("", xml_content) + "\n"


def write_settings_file(path: Path, document: dict[str, Any] | None) -> None:
    """Write a settings document to a file, replacing any existing file.

    :param path: The settings file to write. Missing parent directories
        are created.
    :param document: The settings document to write.
    """
    xml_content = build_settings(document)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(xml_content, encoding="utf-8")
    logger.debug("Wrote settings file %s", path)


def update_settings_file(path: Path, server_entries: Iterable[ServerEntry]) -> int:
    """Add server entries to a settings file.

    The file is created if it doesn't exist.

    :param path: The settings file to update.
    :param server_entries: The entries to add, in order.

    :return: The number of entries added.
    """
    document: dict[str, Any]
    if path.is_file():
        logger.debug("Reading settings file %s", path)
        document = read_settings_file(path)
    else:
        logger.info("Creating settings file %s", path)
        document = {}

    existing_count = len(get_servers(document))
    for server_entry in server_entries:
        document = insert_server(document, server_entry)
    added = len(get_servers(document)) - existing_count

    write_settings_file(path, document)
    logger.info("Added %d server entries to %s", added, path)

    return added


def _from_xml_node(node: Any) -> Any:
    if isinstance(node, list):
        return [_from_xml_node(item) for item in node]
    if not isinstance(node, dict):
        return node

    attributes: dict[str, Any] = {}
    children: dict[str, Any] = {}
    for key, value in node.items():
        if key.startswith(_XML_ATTR_PREFIX):
            attributes[key[len(_XML_ATTR_PREFIX) :]] = value
        elif key == _XML_TEXT_KEY:
            children[TEXT_KEY] = value
        else:
            children[key] = _from_xml_node(value)

    if attributes:
        return {ATTRIBUTES_KEY: attributes, **children}
    return children


def _to_xml_node(node: Any) -> Any:
    if isinstance(node, list):
        return [_to_xml_node(item) for item in node]
    if not isinstance(node, dict):
        return node

    result: dict[str, Any] = {}
    for key, value in node.items():
        if key == ATTRIBUTES_KEY and isinstance(value, dict):
            for name, attribute in value.items():
                result[f"{_XML_ATTR_PREFIX}{name}"] = attribute
        elif key == TEXT_KEY:
            result[_XML_TEXT_KEY] = value
        else:
            result[key] = _to_xml_node(value)

    return result
