#!/usr/bin/env python3

# data_management.py - Rubrik CDM client function library, data management
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

from rubrik_cdm.lib.common import (
    get,
    post,
    patch,
    resolve_timeout,
    LONG_TIMEOUT,
    UsageError,
    NotFoundError,
)
from rubrik_cdm.lib.models import (
    AsyncRequest,
    FilesetSummary,
    ManagedVolumeSummary,
    ObjectList,
    VMSummary,
    require_field,
)
from rubrik_cdm.lib.objects import object_id, validate_host_os
from rubrik_cdm.lib.sla import SLATarget, sla_id, UNPROTECTED, INHERIT, CURRENT


def validate_vmware(object_type):
    if object_type != "vmware":
        raise UsageError("The object type must be 'vmware'")


def get_vm_summary(config, vm_id, timeout=None):
    return VMSummary.from_json(
        get(config, "v1", f"/vmware/vm/{vm_id}", timeout=timeout)
    )


def get_managed_volume_summary(config, managed_volume_id, timeout=None):
    return ManagedVolumeSummary.from_json(
        get(config, "internal", f"/managed_volume/{managed_volume_id}", timeout=timeout)
    )


#
# SLA Domain assignment
#
def assign_sla(config, object_name, object_type, sla_name, timeout=None):
    """
    Add {object_name} to the {sla_name} SLA Domain

    vmware is currently the only supported {object_type}. To exclude the object from all SLA
    assignments use "do not protect" as the {sla_name}. To assign the object to the SLA of the
    next higher level object, use "clear" as the {sla_name}.

    Returns either a "No change required" message or the full API response.

    API endpoint: POST /api/internal/sla_domain/{sla_id}/assign
    API arguments:
    API schema: {"managedIds":["{vm_id}"]}
    """
    timeout = resolve_timeout(config, timeout)

    validate_vmware(object_type)

    target = SLATarget.from_name(sla_name, sentinels=(UNPROTECTED, INHERIT))
    target_sla_id = sla_id(config, target, timeout=timeout)

    vm_id = object_id(config, object_name, "vmware", timeout=timeout)
    vm_summary = get_vm_summary(config, vm_id, timeout=timeout)

    # Inheritance is reflected in the configured SLA, not the effective one
    if target.kind == INHERIT:
        current_sla_id = vm_summary.configured_sla_domain_id
    else:
        current_sla_id = vm_summary.effective_sla_domain_id

    if target_sla_id == current_sla_id:
        return f"No change required. The vSphere VM '{object_name}' is already assigned to the '{sla_name}' SLA Domain."

    data = {"managedIds": [vm_id]}
    return post(
        config,
        "internal",
        f"/sla_domain/{target_sla_id}/assign",
        data=data,
        timeout=timeout,
    )


def get_sla_objects(config, sla_name, object_type="vmware", timeout=None):
    """
    Return a {name: id} mapping of the {object_type} objects protected by {sla_name}

    vmware is currently the only supported {object_type}.

    API endpoint: GET /api/v1/vmware/vm
    API arguments: effective_sla_domain_id={sla_id}, is_relic=false
    API schema: {"total":{total},"data":[{json_data_object},etc.]}
    """
    timeout = resolve_timeout(config, timeout)

    validate_vmware(object_type)

    target_sla_id = object_id(config, sla_name, "sla", timeout=timeout)

    params = {"effective_sla_domain_id": target_sla_id, "is_relic": "false"}
    vm_list = ObjectList.from_json(
        get(config, "v1", "/vmware/vm", params=params, timeout=timeout),
        context="vmware list",
    )

    if vm_list.total == 0:
        return f"The SLA '{sla_name}' is currently not protecting any {object_type} objects."

    vm_name_id = dict()
    for vm in vm_list.data:
        name = require_field(vm, "name", str, "vmware list")
        vm_name_id[name] = require_field(vm, "id", str, "vmware list")

    return vm_name_id


#
# Managed Volumes
#
def begin_managed_volume_snapshot(config, name, timeout=None):
    """
    Open the Managed Volume {name} for writes

    All writes to the Managed Volume until the snapshot is ended will be part of its snapshot.

    Returns either a "No change required" message or the full API response.

    API endpoint: POST /api/internal/managed_volume/{managed_volume_id}/begin_snapshot
    API arguments:
    API schema: {}
    """
    timeout = resolve_timeout(config, timeout)

    managed_volume_id = object_id(config, name, "managedVolume", timeout=timeout)
    managed_volume_summary = get_managed_volume_summary(
        config, managed_volume_id, timeout=timeout
    )

    if managed_volume_summary.is_writable:
        return f"No change required. The Managed Volume '{name}' is already in a writeable state."

    return post(
        config,
        "internal",
        f"/managed_volume/{managed_volume_id}/begin_snapshot",
        data=dict(),
        timeout=timeout,
    )


def end_managed_volume_snapshot(config, name, sla_name="current", timeout=None):
    """
    Close the Managed Volume {name} for writes

    A snapshot will be created containing all writes since the last begin snapshot call. Use
    "current" as the {sla_name} to keep the Managed Volume's existing retention.

    Returns either a "No change required" message or the full API response.

    API endpoint: POST /api/internal/managed_volume/{managed_volume_id}/end_snapshot
    API arguments:
    API schema: {"retentionConfig":{"slaId":"{sla_id}"}}
    """
    timeout = resolve_timeout(config, timeout)

    managed_volume_id = object_id(config, name, "managedVolume", timeout=timeout)
    managed_volume_summary = get_managed_volume_summary(
        config, managed_volume_id, timeout=timeout
    )

    if not managed_volume_summary.is_writable:
        return f"No change required. The Managed Volume '{name}' is already in a read-only state."

    data = dict()
    target = SLATarget.from_name(sla_name, sentinels=(CURRENT,))
    if target.kind != CURRENT:
        data["retentionConfig"] = {"slaId": sla_id(config, target, timeout=timeout)}

    return post(
        config,
        "internal",
        f"/managed_volume/{managed_volume_id}/end_snapshot",
        data=data,
        timeout=timeout,
    )


#
# Snapshot pause and resume
#
def pause_snapshot(config, object_name, object_type="vmware", timeout=None):
    """
    Suspend all snapshot activity for {object_name}

    vmware is currently the only supported {object_type}.

    Returns either a "No change required" message or the full API response.

    API endpoint: PATCH /api/v1/vmware/vm/{vm_id}
    API arguments:
    API schema: {"isVmPaused":true}
    """
    timeout = resolve_timeout(config, timeout, LONG_TIMEOUT)

    validate_vmware(object_type)

    vm_id = object_id(config, object_name, "vmware", timeout=timeout)
    vm_summary = get_vm_summary(config, vm_id, timeout=timeout)

    if vm_summary.is_snappable_blackout_active:
        return f"No change required. The '{object_name}' '{object_type}' is already paused."

    data = {"isVmPaused": True}
    return patch(config, "v1", f"/vmware/vm/{vm_id}", data=data, timeout=timeout)


def resume_snapshot(config, object_name, object_type="vmware", timeout=None):
    """
    Resume all snapshot activity for {object_name}

    vmware is currently the only supported {object_type}.

    Returns either a "No change required" message or the full API response.

    API endpoint: PATCH /api/v1/vmware/vm/{vm_id}
    API arguments:
    API schema: {"isVmPaused":false}
    """
    timeout = resolve_timeout(config, timeout, LONG_TIMEOUT)

    validate_vmware(object_type)

    vm_id = object_id(config, object_name, "vmware", timeout=timeout)
    vm_summary = get_vm_summary(config, vm_id, timeout=timeout)

    if not vm_summary.is_snappable_blackout_active:
        return f"No change required. The '{object_name}' '{object_type}' is currently not paused."

    data = {"isVmPaused": False}
    return patch(config, "v1", f"/vmware/vm/{vm_id}", data=data, timeout=timeout)


#
# On-demand snapshots
#
def on_demand_snapshot_vm(
    config, object_name, object_type="vmware", sla_name="current", timeout=None
):
    """
    Initiate an on-demand snapshot of {object_name}

    vmware is currently the only supported {object_type}. Use "current" as the {sla_name} to
    take the snapshot with the currently assigned SLA Domain.

    Returns the job status URL of the on-demand snapshot.

    API endpoint: POST /api/v1/vmware/vm/{vm_id}/snapshot
    API arguments:
    API schema: {"slaId":"{sla_id}"}
    """
    timeout = resolve_timeout(config, timeout, LONG_TIMEOUT)

    validate_vmware(object_type)

    vm_id = object_id(config, object_name, "vmware", timeout=timeout)

    target = SLATarget.from_name(sla_name, sentinels=(CURRENT,))
    if target.kind == CURRENT:
        snapshot_sla_id = get_vm_summary(
            config, vm_id, timeout=timeout
        ).effective_sla_domain_id
    else:
        snapshot_sla_id = sla_id(config, target, timeout=timeout)

    data = {"slaId": snapshot_sla_id}
    response = post(
        config, "v1", f"/vmware/vm/{vm_id}/snapshot", data=data, timeout=timeout
    )

    return AsyncRequest.from_json(response).href


def on_demand_snapshot_physical(
    config, host_name, sla_name, fileset, host_os, timeout=None
):
    """
    Initiate an on-demand snapshot of the {fileset} Fileset on physical host {host_name}

    Valid {host_os} choices are Linux and Windows. Use "current" as the {sla_name} to take the
    snapshot with the Fileset's currently assigned SLA Domain.

    Returns the job status URL of the on-demand snapshot.

    API endpoint: POST /api/v1/fileset/{fileset_id}/snapshot
    API arguments:
    API schema: {"slaId":"{sla_id}"}
    """
    timeout = resolve_timeout(config, timeout, LONG_TIMEOUT)

    validate_host_os(host_os)

    host_id = object_id(config, host_name, "physicalHost", timeout=timeout)
    fileset_template_id = object_id(
        config, fileset, "filesetTemplate", host_os=host_os, timeout=timeout
    )

    params = {
        "primary_cluster_id": "local",
        "host_id": host_id,
        "is_relic": "false",
        "template_id": fileset_template_id,
    }
    fileset_list = ObjectList.from_json(
        get(config, "v1", "/fileset", params=params, timeout=timeout),
        context="fileset list",
    )

    if fileset_list.total == 0 or not fileset_list.data:
        raise NotFoundError(
            f"The Physical Host '{host_name}' is not assigned to the '{fileset}' Fileset"
        )

    fileset_summary = FilesetSummary.from_json(fileset_list.data[0])

    target = SLATarget.from_name(sla_name, sentinels=(CURRENT,))
    if target.kind == CURRENT:
        snapshot_sla_id = fileset_summary.effective_sla_domain_id
    else:
        snapshot_sla_id = sla_id(config, target, timeout=timeout)

    data = {"slaId": snapshot_sla_id}
    response = post(
        config,
        "v1",
        f"/fileset/{fileset_summary.id}/snapshot",
        data=data,
        timeout=timeout,
    )

    return AsyncRequest.from_json(response).href
