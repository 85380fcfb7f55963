#!/usr/bin/env python3

# formatters.py - Rubrik CDM Click CLI output formatters library
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

from colorama import Fore, Style
from json import dumps as jdumps


NO_CHANGE_PREFIX = "No change required."


def cli_result_format_pretty(CLI_CONFIG, data):
    """
    Pretty format the result of a state-changing command

    A "No change required" message is shown in yellow; a full API response is shown as indented JSON.
    """

    if isinstance(data, str):
        if data.startswith(NO_CHANGE_PREFIX):
            return f"{Fore.YELLOW}{data}{Fore.RESET}"
        return data

    return f"{Fore.GREEN}Request accepted:{Fore.RESET}\n{jdumps(data, indent=2)}"


def cli_job_format_pretty(CLI_CONFIG, data):
    """
    Pretty format the job status URL of an on-demand snapshot
    """

    return f"{Style.BRIGHT}Job status URL:{Style.RESET_ALL} {data}"


def cli_cluster_nodes_format_pretty(CLI_CONFIG, data):
    """
    Pretty format the output of cli_cluster_nodes
    """

    output = list()
    output.append(f"{Style.BRIGHT}Node IP addresses{Style.RESET_ALL}")
    for ip_address in data:
        output.append(f"  {ip_address}")

    return "\n".join(output)


def cli_sla_objects_format_pretty(CLI_CONFIG, data):
    """
    Pretty format the output of cli_sla_objects
    """

    if isinstance(data, str):
        return f"{Fore.YELLOW}{data}{Fore.RESET}"

    # Set the fields data
    fields = {
        "name": {"header": "Name", "length": len("Name") + 1},
        "id": {"header": "ID", "length": len("ID") + 1},
    }

    # Parse each object and adjust field lengths
    for name, object_id in data.items():
        fields["name"]["length"] = max(fields["name"]["length"], len(name) + 1)
        fields["id"]["length"] = max(fields["id"]["length"], len(object_id) + 1)

    # Create the output object and define the line format
    output = list()
    line = "{bold}{name: <{lname}} {oid: <{lid}}{end}"

    # Add the header line
    output.append(
        line.format(
            bold=Style.BRIGHT,
            end=Style.RESET_ALL,
            name=fields["name"]["header"],
            lname=fields["name"]["length"],
            oid=fields["id"]["header"],
            lid=fields["id"]["length"],
        )
    )

    # Add a line per object
    for name in sorted(data):
        output.append(
            line.format(
                bold="",
                end="",
                name=name,
                lname=fields["name"]["length"],
                oid=data[name],
                lid=fields["id"]["length"],
            )
        )

    return "\n".join(output)


def cli_connection_list_format_pretty(CLI_CONFIG, data):
    """
    Pretty format the output of cli_connection_list
    """

    # Set the fields data
    fields = {
        "name": {"header": "Name", "length": len("Name") + 1},
        "description": {"header": "Description", "length": len("Description") + 1},
        "address": {"header": "Address", "length": len("Address") + 1},
        "username": {"header": "Username", "length": len("Username") + 1},
        "api_token": {"header": "API Token", "length": len("API Token") + 1},
        "verify_ssl": {"header": "Verify SSL", "length": len("Verify SSL") + 1},
    }

    # Parse each connection and adjust field lengths
    for connection in data:
        for field, length in [(f, fields[f]["length"]) for f in fields]:
            _length = len(str(connection[field]))
            if _length > length:
                length = len(str(connection[field])) + 1

            fields[field]["length"] = length

    # Create the output object and define the line format
    output = list()
    line = "{bold}{name: <{lname}} {desc: <{ldesc}} {addr: <{laddr}} {user: <{luser}} {tokn: <{ltokn}} {vssl: <{lvssl}}{end}"

    # Add the header line
    output.append(
        line.format(
            bold=Style.BRIGHT,
            end=Style.RESET_ALL,
            name=fields["name"]["header"],
            lname=fields["name"]["length"],
            desc=fields["description"]["header"],
            ldesc=fields["description"]["length"],
            addr=fields["address"]["header"],
            laddr=fields["address"]["length"],
            user=fields["username"]["header"],
            luser=fields["username"]["length"],
            tokn=fields["api_token"]["header"],
            ltokn=fields["api_token"]["length"],
            vssl=fields["verify_ssl"]["header"],
            lvssl=fields["verify_ssl"]["length"],
        )
    )

    # Add a line per connection
    for connection in data:
        output.append(
            line.format(
                bold="",
                end="",
                name=str(connection["name"]),
                lname=fields["name"]["length"],
                desc=str(connection["description"]),
                ldesc=fields["description"]["length"],
                addr=str(connection["address"]),
                laddr=fields["address"]["length"],
                user=str(connection["username"]),
                luser=fields["username"]["length"],
                tokn=str(connection["api_token"]),
                ltokn=fields["api_token"]["length"],
                vssl=str(connection["verify_ssl"]),
                lvssl=fields["verify_ssl"]["length"],
            )
        )

    return "\n".join(output)
