#!/usr/bin/env python3

# cluster.py - Rubrik CDM client function library, cluster information
# Part of the Rubrik CDM client
#
#    Copyright (C) 2018-2024 Joshua M. Boniface <joshua@boniface.me>
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation, version 3.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License
#    along with this program.  If not, see <https://www.gnu.org/licenses/>.
#
###############################################################################

from rubrik_cdm.lib.common import get
from rubrik_cdm.lib.models import ClusterInfo, NodeList


def cluster_version(config, timeout=None):
    """
    Get the CDM version of the Rubrik cluster

    API endpoint: GET /api/v1/cluster/me
    API arguments:
    API schema: {json_data_object}
    """
    return ClusterInfo.from_json(
        get(config, "v1", "/cluster/me", timeout=timeout)
    ).version


def cluster_node_ip(config, timeout=None):
    """
    Get the IP addresses of all nodes in the Rubrik cluster

    API endpoint: GET /api/internal/cluster/me/node
    API arguments:
    API schema: {"total":{total},"data":[{json_data_object},etc.]}
    """
    return NodeList.from_json(
        get(config, "internal", "/cluster/me/node", timeout=timeout)
    ).ip_addresses
