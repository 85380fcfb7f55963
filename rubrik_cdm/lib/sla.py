#!/usr/bin/env python3

# sla.py - Rubrik CDM client function library, SLA Domain targets
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

from rubrik_cdm.lib.common import UsageError
from rubrik_cdm.lib.objects import object_id


# Target kinds
EXPLICIT = "explicit"
UNPROTECTED = "unprotected"
INHERIT = "inherit"
CURRENT = "current"

# Literal SLA names with a special meaning, and the kind each one selects
SENTINEL_NAMES = {
    "do not protect": UNPROTECTED,
    "clear": INHERIT,
    "current": CURRENT,
}

# Wire IDs the API accepts in place of a real SLA Domain ID
SENTINEL_IDS = {
    UNPROTECTED: "UNPROTECTED",
    INHERIT: "INHERIT",
}


class SLATarget(object):
    """
    The SLA Domain an operation should apply: an explicitly named SLA Domain, or one of
    "unprotected" (exclude from all SLAs), "inherit" (use the parent object's SLA), or
    "current" (keep whatever the object is already using).
    """

    def __init__(self, kind, name=None):
        if kind not in (EXPLICIT, UNPROTECTED, INHERIT, CURRENT):
            raise UsageError(f"Invalid SLA target kind '{kind}'")
        if kind == EXPLICIT and not name:
            raise UsageError("An explicit SLA target requires an SLA Domain name")
        self.kind = kind
        self.name = name

    @classmethod
    def from_name(cls, sla_name, sentinels=()):
        """
        Build a target from a user-supplied {sla_name}; only the {sentinels} kinds are honoured,
        any other literal is looked up as a normal SLA Domain name
        """
        kind = SENTINEL_NAMES.get(sla_name)
        if kind is not None and kind in sentinels:
            return cls(kind, sla_name)
        return cls(EXPLICIT, sla_name)

    def __eq__(self, other):
        if not isinstance(other, SLATarget):
            return NotImplemented
        return self.kind == other.kind and self.name == other.name

    def __repr__(self):
        return f"SLATarget({self.kind!r}, {self.name!r})"


def sla_id(config, target, timeout=None):
    """
    Return the SLA Domain ID for {target}

    "current" depends on the object the SLA is applied to and must be handled by the caller.
    """
    if target.kind == EXPLICIT:
        return object_id(config, target.name, "sla", timeout=timeout)
    elif target.kind in SENTINEL_IDS:
        return SENTINEL_IDS[target.kind]
    else:
        raise UsageError("The 'current' SLA Domain cannot be resolved without an object")
