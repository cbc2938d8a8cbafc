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

"""Server entries for internal package feeds."""

import logging
from collections.abc import Iterable

from .servers import ServerEntry

ACCESS_TOKEN_ENV_SETTING = "ENV_MAVEN_ACCESS_TOKEN"

# Resolved by Maven at build time, never by us.
ACCESS_TOKEN_HEADER_VALUE = "Basic ${env." + ACCESS_TOKEN_ENV_SETTING + "}"

logger = logging.getLogger(__name__)


def split_delimited(value: str | None, delimiter: str = ",") -> list[str]:
    """Split a delimited input into its non-empty, stripped items."""
    if not value:
        return []

    return [item.strip() for item in value.split(delimiter) if item.strip()]


def get_internal_feeds_server_elements(
    feeds: Iterable[str] | None,
) -> list[ServerEntry]:
    """Create a server entry for each internal feed.

    Each entry authenticates with an ``Authorization`` header whose value
    references the ``ENV_MAVEN_ACCESS_TOKEN`` environment variable.

    :param feeds: The feed identifiers, in the order they should be added.

    :return: The server entries, one per feed.
    """
    feed_ids = list(feeds) if feeds else []
    if not feed_ids:
        return []

    logger.info("Generating %d internal feed server entries", len(feed_ids))

    return [
        ServerEntry.with_authorization_header(feed, ACCESS_TOKEN_HEADER_VALUE)
        for feed in feed_ids
    ]
