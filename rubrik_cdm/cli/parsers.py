#!/usr/bin/env python3

# parsers.py - Rubrik CDM Click CLI data parser function library
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

from os import path
from re import sub

from rubrik_cdm.cli.helpers import read_config_from_yaml


def mask_secret(secret, show_flag):
    if secret is None or show_flag:
        return secret
    return sub(r"[^-]", "x", secret)


def cli_connection_list_parser(connections_config, show_keys_flag):
    """
    Parse connections_config into formatable data for cli_connection_list
    """

    connections_data = list()

    for connection, details in connections_config.items():
        if details.get("cfgfile", None) is not None:
            if path.isfile(details.get("cfgfile")):
                node_ip, username, _, api_token, verify_ssl = read_config_from_yaml(
                    details.get("cfgfile")
                )
            else:
                continue
            description = details.get("description", details.get("cfgfile"))
        else:
            node_ip = details["node_ip"]
            username = details.get("username", None)
            api_token = details.get("api_token", None)
            verify_ssl = details.get("verify_ssl", False)
            description = details.get("description", "N/A")

        connections_data.append(
            {
                "name": connection,
                "description": description,
                "address": node_ip,
                "username": username,
                "api_token": mask_secret(api_token, show_keys_flag),
                "verify_ssl": verify_ssl,
            }
        )

    return connections_data
