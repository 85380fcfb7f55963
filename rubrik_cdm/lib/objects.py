#!/usr/bin/env python3

# objects.py - Rubrik CDM client function library, object lookup
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

from rubrik_cdm.lib.common import get, UsageError, NotFoundError, AmbiguousError
from rubrik_cdm.lib.models import ObjectList, require_field


VALID_OBJECT_TYPES = [
    "vmware",
    "sla",
    "vmwareHost",
    "physicalHost",
    "filesetTemplate",
    "managedVolume",
]

VALID_HOST_OS = ["Linux", "Windows"]


def validate_host_os(host_os):
    if host_os is None:
        raise UsageError("You must provide the Fileset Template OS type")
    if host_os not in VALID_HOST_OS:
        raise UsageError("The host OS must be either 'Linux' or 'Windows'")


def object_query(object_name, object_type, host_os=None):
    """
    Return the (api_version, endpoint, params, name_field) used to list candidates for {object_type}
    """
    if object_type not in VALID_OBJECT_TYPES:
        raise UsageError(
            "The object type must be 'vmware', 'sla', 'vmwareHost', 'physicalHost', 'filesetTemplate', or 'managedVolume'"
        )

    if object_type == "vmware":
        return (
            "v1",
            "/vmware/vm",
            {"primary_cluster_id": "local", "is_relic": "false", "name": object_name},
            "name",
        )
    elif object_type == "sla":
        return (
            "v1",
            "/sla_domain",
            {"primary_cluster_id": "local", "name": object_name},
            "name",
        )
    elif object_type == "vmwareHost":
        # The host endpoint has no name filter; match locally
        return ("v1", "/vmware/host", {"primary_cluster_id": "local"}, "name")
    elif object_type == "physicalHost":
        return (
            "v1",
            "/host",
            {"primary_cluster_id": "local", "hostname": object_name},
            "hostname",
        )
    elif object_type == "filesetTemplate":
        validate_host_os(host_os)
        return (
            "v1",
            "/fileset_template",
            {
                "primary_cluster_id": "local",
                "operating_system_type": host_os,
                "name": object_name,
            },
            "name",
        )
    else:
        return (
            "internal",
            "/managed_volume",
            {"is_relic": "false", "primary_cluster_id": "local", "name": object_name},
            "name",
        )


def object_id(config, object_name, object_type, host_os=None, timeout=None):
    """
    Search the Rubrik cluster for {object_name} of {object_type} and return its ID

    Valid object types are: vmware, sla, vmwareHost, physicalHost, filesetTemplate, managedVolume.
    The filesetTemplate type also requires {host_os} (Linux or Windows).

    API endpoint: GET /api/{v1,internal}/{object list endpoint}
    API arguments: primary_cluster_id=local, is_relic=false, name={object_name}
    API schema: {"total":{total},"data":[{json_data_object},etc.]}
    """
    api_version, endpoint, params, name_field = object_query(
        object_name, object_type, host_os
    )

    response = ObjectList.from_json(
        get(config, api_version, endpoint, params=params, timeout=timeout),
        context=f"{object_type} list",
    )

    not_found = NotFoundError(
        f"The {object_type} object '{object_name}' was not found on the Rubrik cluster"
    )

    if response.total == 0:
        raise not_found

    # The list filters are substring matches; only an exact name counts
    object_ids = [
        require_field(item, "id", str, f"{object_type} list")
        for item in response.data
        if item.get(name_field) == object_name
    ]

    if len(object_ids) > 1:
        raise AmbiguousError(
            f"Multiple {object_type} objects named '{object_name}' were found on the Rubrik cluster. Unable to return a specific object id"
        )
    elif len(object_ids) == 0:
        raise not_found

    return object_ids[0]
