#!/usr/bin/env python3

# models.py - Rubrik CDM client function library, API response types
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

from rubrik_cdm.lib.common import DecodeError


def require_field(data, key, kind, context):
    """
    Return {key} from the JSON object {data}, raising DecodeError if it is missing or not of {kind}
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {context}, got {type(data).__name__}")
    if key not in data:
        raise DecodeError(f"The {context} response is missing the '{key}' field")
    value = data[key]
    # bool is a subclass of int; never accept it as a number
    if (isinstance(value, bool) and kind is not bool) or not isinstance(value, kind):
        raise DecodeError(
            f"The '{key}' field of the {context} response has unexpected type {type(value).__name__}"
        )
    return value


class ObjectList(object):
    """
    A paged list response, e.g. from GET /v1/vmware/vm
    """

    def __init__(self, total, data):
        self.total = total
        self.data = data

    @classmethod
    def from_json(cls, data, context="object list"):
        total = require_field(data, "total", (int, float), context)
        items = require_field(data, "data", list, context)
        for item in items:
            if not isinstance(item, dict):
                raise DecodeError(f"The {context} response contains a non-object entry")
        return cls(int(total), items)


class VMSummary(object):
    """
    The summary of a vSphere VM from GET /v1/vmware/vm/{id}
    """

    def __init__(
        self,
        vm_id,
        name,
        configured_sla_domain_id,
        effective_sla_domain_id,
        is_snappable_blackout_active,
    ):
        self.id = vm_id
        self.name = name
        self.configured_sla_domain_id = configured_sla_domain_id
        self.effective_sla_domain_id = effective_sla_domain_id
        self.is_snappable_blackout_active = is_snappable_blackout_active

    @classmethod
    def from_json(cls, data):
        context = "vSphere VM summary"
        blackout_status = require_field(data, "blackoutWindowStatus", dict, context)
        return cls(
            require_field(data, "id", str, context),
            require_field(data, "name", str, context),
            require_field(data, "configuredSlaDomainId", str, context),
            require_field(data, "effectiveSlaDomainId", str, context),
            require_field(
                blackout_status, "isSnappableBlackoutActive", bool, context
            ),
        )


class ManagedVolumeSummary(object):
    """
    The summary of a Managed Volume from GET /internal/managed_volume/{id}
    """

    def __init__(self, volume_id, name, is_writable):
        self.id = volume_id
        self.name = name
        self.is_writable = is_writable

    @classmethod
    def from_json(cls, data):
        context = "Managed Volume summary"
        return cls(
            require_field(data, "id", str, context),
            require_field(data, "name", str, context),
            require_field(data, "isWritable", bool, context),
        )


class FilesetSummary(object):
    """
    A Fileset entry from GET /v1/fileset
    """

    def __init__(self, fileset_id, effective_sla_domain_id):
        self.id = fileset_id
        self.effective_sla_domain_id = effective_sla_domain_id

    @classmethod
    def from_json(cls, data):
        context = "Fileset summary"
        return cls(
            require_field(data, "id", str, context),
            require_field(data, "effectiveSlaDomainId", str, context),
        )


class AsyncRequest(object):
    """
    The asynchronous job handle returned by the on-demand snapshot endpoints
    """

    def __init__(self, href, request_id=None, status=None):
        self.href = href
        self.id = request_id
        self.status = status

    @classmethod
    def from_json(cls, data):
        context = "asynchronous request"
        links = require_field(data, "links", list, context)
        if not links:
            raise DecodeError(f"The {context} response contains no links")
        href = require_field(links[0], "href", str, context)
        return cls(href, data.get("id"), data.get("status"))


class ClusterInfo(object):
    """
    The cluster details from GET /v1/cluster/me
    """

    def __init__(self, version, cluster_id=None, api_version=None):
        self.version = version
        self.id = cluster_id
        self.api_version = api_version

    @classmethod
    def from_json(cls, data):
        return cls(
            require_field(data, "version", str, "cluster"),
            data.get("id"),
            data.get("apiVersion"),
        )


class NodeList(object):
    """
    The node list from GET /internal/cluster/me/node
    """

    def __init__(self, ip_addresses):
        self.ip_addresses = ip_addresses

    @classmethod
    def from_json(cls, data):
        nodes = require_field(data, "data", list, "cluster node")
        return cls([require_field(node, "ipAddress", str, "cluster node") for node in nodes])
