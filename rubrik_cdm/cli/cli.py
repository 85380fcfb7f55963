#!/usr/bin/env python3

# cli.py - Rubrik CDM Click CLI main library
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

from functools import wraps
from json import dumps as jdumps
from os import environ, makedirs, path

from rubrik_cdm.cli.helpers import *
from rubrik_cdm.cli.parsers import *
from rubrik_cdm.cli.formatters import *

from rubrik_cdm.lib.common import RubrikError, VERSION

import rubrik_cdm.lib.cluster
import rubrik_cdm.lib.connection
import rubrik_cdm.lib.data_management
import rubrik_cdm.lib.objects

import click


###############################################################################
# Context and completion handler, globals
###############################################################################


CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"], max_content_width=MAX_CONTENT_WIDTH
)

CLI_CONFIG = dict()


###############################################################################
# Local helper functions
###############################################################################


def finish(success=True, data=None, formatter=None):
    """
    Output data to the terminal and exit based on code (T/F or integer code)
    """

    if data is not None:
        if formatter is not None and success:
            if formatter.__name__ == "<lambda>":
                # We don't pass CLI_CONFIG into lambdas
                echo(CLI_CONFIG, formatter(data))
            else:
                echo(CLI_CONFIG, formatter(CLI_CONFIG, data))
        else:
            echo(CLI_CONFIG, data)

    # Allow passing raw values if not a bool
    if isinstance(success, bool):
        if success:
            exit(0)
        else:
            exit(1)
    else:
        exit(success)


def call_lib(function, *args, **kwargs):
    """
    Run a library function against CLI_CONFIG and return (success, data)
    """

    try:
        return True, function(CLI_CONFIG, *args, **kwargs)
    except RubrikError as e:
        return False, f"Error: {e}"


def version(ctx, param, value):
    """
    Show the version of the CLI client
    """

    if not value or ctx.resilient_parsing:
        return

    echo(CLI_CONFIG, f"Rubrik CDM CLI client version {VERSION}")
    ctx.exit()


###############################################################################
# Click command decorators
###############################################################################


def connection_req(function):
    """
    General Decorator:
    Wraps a Click command which requires a connection to be set and validates that it is present
    """

    @wraps(function)
    def validate_connection(*args, **kwargs):
        if CLI_CONFIG.get("badcfg", None) and CLI_CONFIG.get("connection"):
            echo(
                CLI_CONFIG,
                f"""Invalid connection "{CLI_CONFIG.get('connection')}" specified; set a valid connection and try again.""",
            )
            exit(1)
        elif CLI_CONFIG.get("badcfg", None):
            echo(
                CLI_CONFIG,
                'No connection specified and no "rubrik_cdm_*" environment variables found. Use "rubrik connection" to add a connection.',
            )
            exit(1)

        echo(
            CLI_CONFIG,
            f'''Using connection "{CLI_CONFIG.get('connection')}" - Host: "{CLI_CONFIG.get('node_ip')}"''',
            stderr=True,
        )
        echo(
            CLI_CONFIG,
            "",
            stderr=True,
        )

        return function(*args, **kwargs)

    return validate_connection


def format_opt(formats, default_format="pretty"):
    """
    Click Option Decorator with argument:
    Wraps a Click command that can output in multiple formats; {formats} defines a dictionary of
    formatting functions for the command with keys as valid format types.
    Injects a "format_function" argument into the function for this purpose.
    """

    if default_format not in formats.keys():
        echo(CLI_CONFIG, f"Fatal code error: {default_format} not in {formats.keys()}")
        exit(255)

    def format_decorator(function):
        @click.option(
            "-f",
            "--format",
            "output_format",
            default=default_format,
            show_default=True,
            type=click.Choice(formats.keys()),
            help="Output information in this format.",
        )
        @wraps(function)
        def format_action(*args, **kwargs):
            kwargs["format_function"] = formats[kwargs["output_format"]]

            del kwargs["output_format"]

            return function(*args, **kwargs)

        return format_action

    return format_decorator


RESULT_FORMATS = {
    "pretty": cli_result_format_pretty,
    "json": lambda d: jdumps(d),
    "json-pretty": lambda d: jdumps(d, indent=2),
}

JOB_FORMATS = {
    "pretty": cli_job_format_pretty,
    "raw": lambda d: d,
    "json": lambda d: jdumps({"job_status_url": d}),
}

SLA_OPTION_HELP = 'The SLA Domain to use; "current" uses the currently assigned SLA Domain.'


###############################################################################
# Click command definitions
###############################################################################


###############################################################################
# > rubrik cluster
###############################################################################
@click.group(
    name="cluster",
    short_help="Show Rubrik cluster information.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_cluster():
    """
    Show information about the connected Rubrik cluster.
    """
    pass


###############################################################################
# > rubrik cluster version
###############################################################################
@click.command(
    name="version",
    short_help="Show cluster CDM version.",
)
@connection_req
def cli_cluster_version():
    """
    Show the CDM version of the Rubrik cluster.
    """

    retcode, retdata = call_lib(rubrik_cdm.lib.cluster.cluster_version)
    finish(retcode, retdata)


###############################################################################
# > rubrik cluster nodes
###############################################################################
@click.command(
    name="nodes",
    short_help="Show cluster node IP addresses.",
)
@connection_req
@format_opt(
    {
        "pretty": cli_cluster_nodes_format_pretty,
        "raw": lambda d: "\n".join(d),
        "json": lambda d: jdumps(d),
        "json-pretty": lambda d: jdumps(d, indent=2),
    }
)
def cli_cluster_nodes(
    format_function,
):
    """
    Show the IP addresses of all nodes in the Rubrik cluster.
    """

    retcode, retdata = call_lib(rubrik_cdm.lib.cluster.cluster_node_ip)
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik object
###############################################################################
@click.group(
    name="object",
    short_help="Look up Rubrik objects.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_object():
    """
    Look up objects on the Rubrik cluster.
    """
    pass


###############################################################################
# > rubrik object id
###############################################################################
@click.command(
    name="id",
    short_help="Show the ID of an object.",
)
@connection_req
@click.argument("name")
@click.argument(
    "object_type",
    metavar="TYPE",
    type=click.Choice(rubrik_cdm.lib.objects.VALID_OBJECT_TYPES),
)
@click.option(
    "-o",
    "--host-os",
    "host_os",
    default=None,
    type=click.Choice(rubrik_cdm.lib.objects.VALID_HOST_OS),
    help="The operating system of a filesetTemplate object.",
)
def cli_object_id(
    name,
    object_type,
    host_os,
):
    """
    Show the ID of the object NAME of type TYPE.

    A filesetTemplate object also requires the "-o"/"--host-os" option.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.objects.object_id, name, object_type, host_os=host_os
    )
    finish(retcode, retdata)


###############################################################################
# > rubrik sla
###############################################################################
@click.group(
    name="sla",
    short_help="Manage SLA Domain assignments.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_sla():
    """
    Manage the SLA Domains assigned to Rubrik objects.
    """
    pass


###############################################################################
# > rubrik sla assign
###############################################################################
@click.command(
    name="assign",
    short_help="Assign an object to an SLA Domain.",
)
@connection_req
@click.argument("name")
@click.argument("sla_name", metavar="SLA")
@click.option(
    "-t",
    "--type",
    "object_type",
    default="vmware",
    show_default=True,
    type=click.Choice(["vmware"]),
    help="The type of the object.",
)
@format_opt(RESULT_FORMATS)
def cli_sla_assign(
    name,
    sla_name,
    object_type,
    format_function,
):
    """
    Assign the object NAME to the SLA Domain SLA.

    Use "do not protect" as the SLA to exclude the object from all SLA Domains, or "clear" to
    inherit the SLA Domain of the parent object.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.assign_sla, name, object_type, sla_name
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik sla objects
###############################################################################
@click.command(
    name="objects",
    short_help="List objects protected by an SLA Domain.",
)
@connection_req
@click.argument("sla_name", metavar="SLA")
@click.option(
    "-t",
    "--type",
    "object_type",
    default="vmware",
    show_default=True,
    type=click.Choice(["vmware"]),
    help="The type of the objects.",
)
@format_opt(
    {
        "pretty": cli_sla_objects_format_pretty,
        "json": lambda d: jdumps(d),
        "json-pretty": lambda d: jdumps(d, indent=2),
    }
)
def cli_sla_objects(
    sla_name,
    object_type,
    format_function,
):
    """
    List the names and IDs of all objects protected by the SLA Domain SLA.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.get_sla_objects, sla_name, object_type
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik volume
###############################################################################
@click.group(
    name="volume",
    short_help="Manage Managed Volume snapshots.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_volume():
    """
    Open and close Managed Volumes for writes.
    """
    pass


###############################################################################
# > rubrik volume begin
###############################################################################
@click.command(
    name="begin",
    short_help="Begin a Managed Volume snapshot.",
)
@connection_req
@click.argument("name")
@format_opt(RESULT_FORMATS)
def cli_volume_begin(
    name,
    format_function,
):
    """
    Open the Managed Volume NAME for writes.

    All writes until the snapshot is ended will be part of the snapshot.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.begin_managed_volume_snapshot, name
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik volume end
###############################################################################
@click.command(
    name="end",
    short_help="End a Managed Volume snapshot.",
)
@connection_req
@click.argument("name")
@click.option(
    "-s",
    "--sla",
    "sla_name",
    default="current",
    show_default=True,
    help=SLA_OPTION_HELP,
)
@format_opt(RESULT_FORMATS)
def cli_volume_end(
    name,
    sla_name,
    format_function,
):
    """
    Close the Managed Volume NAME for writes, creating a snapshot of all writes since it was opened.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.end_managed_volume_snapshot, name, sla_name
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik vm
###############################################################################
@click.group(
    name="vm",
    short_help="Manage vSphere VM snapshots.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_vm():
    """
    Pause, resume and take on-demand snapshots of vSphere VMs.
    """
    pass


###############################################################################
# > rubrik vm pause
###############################################################################
@click.command(
    name="pause",
    short_help="Pause snapshots of a VM.",
)
@connection_req
@click.argument("name")
@format_opt(RESULT_FORMATS)
def cli_vm_pause(
    name,
    format_function,
):
    """
    Suspend all snapshot activity for the vSphere VM NAME.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.pause_snapshot,
        name,
        "vmware",
        timeout=CLI_CONFIG.get("timeout"),
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik vm resume
###############################################################################
@click.command(
    name="resume",
    short_help="Resume snapshots of a VM.",
)
@connection_req
@click.argument("name")
@format_opt(RESULT_FORMATS)
def cli_vm_resume(
    name,
    format_function,
):
    """
    Resume all snapshot activity for the vSphere VM NAME.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.resume_snapshot,
        name,
        "vmware",
        timeout=CLI_CONFIG.get("timeout"),
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik vm snapshot
###############################################################################
@click.command(
    name="snapshot",
    short_help="Take an on-demand snapshot of a VM.",
)
@connection_req
@click.argument("name")
@click.option(
    "-s",
    "--sla",
    "sla_name",
    default="current",
    show_default=True,
    help=SLA_OPTION_HELP,
)
@format_opt(JOB_FORMATS)
def cli_vm_snapshot(
    name,
    sla_name,
    format_function,
):
    """
    Take an on-demand snapshot of the vSphere VM NAME and show the job status URL.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.on_demand_snapshot_vm,
        name,
        "vmware",
        sla_name,
        timeout=CLI_CONFIG.get("timeout"),
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik physical
###############################################################################
@click.group(
    name="physical",
    short_help="Manage physical host snapshots.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_physical():
    """
    Take on-demand snapshots of physical host Filesets.
    """
    pass


###############################################################################
# > rubrik physical snapshot
###############################################################################
@click.command(
    name="snapshot",
    short_help="Take an on-demand snapshot of a Fileset.",
)
@connection_req
@click.argument("host_name", metavar="HOST")
@click.argument("fileset")
@click.option(
    "-o",
    "--host-os",
    "host_os",
    required=True,
    type=click.Choice(rubrik_cdm.lib.objects.VALID_HOST_OS),
    help="The operating system of the physical host.",
)
@click.option(
    "-s",
    "--sla",
    "sla_name",
    default="current",
    show_default=True,
    help=SLA_OPTION_HELP,
)
@format_opt(JOB_FORMATS)
def cli_physical_snapshot(
    host_name,
    fileset,
    host_os,
    sla_name,
    format_function,
):
    """
    Take an on-demand snapshot of the Fileset FILESET on the physical host HOST and show the job
    status URL.
    """

    retcode, retdata = call_lib(
        rubrik_cdm.lib.data_management.on_demand_snapshot_physical,
        host_name,
        sla_name,
        fileset,
        host_os,
        timeout=CLI_CONFIG.get("timeout"),
    )
    finish(retcode, retdata, format_function)


###############################################################################
# > rubrik connection
###############################################################################
@click.group(
    name="connection",
    short_help="Manage Rubrik API connections.",
    context_settings=CONTEXT_SETTINGS,
)
def cli_connection():
    """
    Manage the Rubrik clusters this CLI client can connect to.
    """
    pass


###############################################################################
# > rubrik connection add
###############################################################################
@click.command(
    name="add",
    short_help="Add connections to the client database.",
)
@click.argument("name")
@click.option(
    "-d",
    "--description",
    "description",
    required=False,
    default="N/A",
    help="A text description of the connection.",
)
@click.option(
    "-a",
    "--address",
    "address",
    required=False,
    default=None,
    help="The IP address/hostname of a Rubrik cluster node.",
)
@click.option(
    "-u",
    "--username",
    "username",
    required=False,
    default=None,
    help="The username to authenticate with.",
)
@click.option(
    "-p",
    "--password",
    "password",
    required=False,
    default=None,
    help="The password to authenticate with.",
)
@click.option(
    "-k",
    "--api-token",
    "api_token",
    required=False,
    default=None,
    help="An API token to authenticate with instead of a username and password.",
)
@click.option(
    "-g",
    "--generate-token",
    "generate_token_flag",
    is_flag=True,
    default=False,
    help="Create an API session token from the username and password and store it instead of the password.",
)
@click.option(
    "-c",
    "--cfgfile",
    "cfgfile",
    required=False,
    default=None,
    help="A YAML credentials file to read the connection details from instead.",
)
@click.option(
    "-s/-S",
    "--verify-ssl/--no-verify-ssl",
    "verify_ssl_flag",
    is_flag=True,
    default=False,
    help="Whether or not to verify the cluster SSL certificate.  [default: False]",
)
def cli_connection_add(
    name,
    description,
    address,
    username,
    password,
    api_token,
    generate_token_flag,
    cfgfile,
    verify_ssl_flag,
):
    """
    Add the Rubrik connection NAME to the database of the local CLI client.

    Either "-a"/"--address" with credentials, or "-c"/"--cfgfile" must be given. Adding a connection
    with an existing NAME will replace the existing connection.
    """

    if cfgfile is not None:
        connection_details = {"description": description, "cfgfile": cfgfile}
        target = cfgfile
    else:
        if address is None:
            finish(False, 'Either "--address" or "--cfgfile" must be specified')

        if generate_token_flag:
            try:
                token_config = rubrik_cdm.lib.connection.connect(
                    node_ip=address,
                    username=username,
                    password=password,
                    verify_ssl=verify_ssl_flag,
                    use_environment=False,
                )
                api_token = rubrik_cdm.lib.connection.get_session_token(token_config)
            except RubrikError as e:
                finish(False, f"Error: {e}")
            password = None

        connection_details = {
            "description": description,
            "node_ip": address,
            "username": username,
            "password": password,
            "api_token": api_token,
            "verify_ssl": verify_ssl_flag,
        }
        target = f"https://{address}"

    # Get the store data
    connections_config = get_store(CLI_CONFIG["store_path"])

    # Add (or update) the new connection details
    connections_config[name] = connection_details

    # Update the store data
    update_store(CLI_CONFIG["store_path"], connections_config)

    finish(
        True,
        f"""Added connection "{name}" ({target}) to client database""",
    )


###############################################################################
# > rubrik connection remove
###############################################################################
@click.command(
    name="remove",
    short_help="Remove connections from the client database.",
)
@click.argument("name")
def cli_connection_remove(
    name,
):
    """
    Remove the Rubrik connection NAME from the database of the local CLI client.
    """

    # Get the store data
    connections_config = get_store(CLI_CONFIG["store_path"])

    # Remove the entry matching the name
    try:
        connections_config.pop(name)
    except KeyError:
        finish(False, f"""No connection found with name "{name}" in local database""")

    # Update the store data
    update_store(CLI_CONFIG["store_path"], connections_config)

    finish(True, f"""Removed connection "{name}" from client database""")


###############################################################################
# > rubrik connection list
###############################################################################
@click.command(
    name="list",
    short_help="List connections in the client database.",
)
@click.option(
    "-k",
    "--show-keys",
    "show_keys_flag",
    is_flag=True,
    default=False,
    help="Show secure API tokens.",
)
@format_opt(
    {
        "pretty": cli_connection_list_format_pretty,
        "raw": lambda d: "\n".join([c["name"] for c in d]),
        "json": lambda d: jdumps(d),
        "json-pretty": lambda d: jdumps(d, indent=2),
    }
)
def cli_connection_list(
    show_keys_flag,
    format_function,
):
    """
    List all Rubrik connections in the database of the local CLI client.

    \b
    Format options:
        "pretty": Output all details in a nice tabular list format.
        "raw": Output connection names one per line.
        "json": Output in unformatted JSON.
        "json-pretty": Output in formatted JSON.
    """

    connections_config = get_store(CLI_CONFIG["store_path"])
    connections_data = cli_connection_list_parser(connections_config, show_keys_flag)
    finish(True, connections_data, format_function)


###############################################################################
# > rubrik
###############################################################################
@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-c",
    "--connection",
    "_connection",
    envvar="RUBRIK_CONNECTION",
    default=None,
    help="Cluster to connect to.",
)
@click.option(
    "-v",
    "--debug",
    "_debug",
    envvar="RUBRIK_DEBUG",
    is_flag=True,
    default=False,
    help="Additional debug details.",
)
@click.option(
    "-q",
    "--quiet",
    "_quiet",
    envvar="RUBRIK_QUIET",
    is_flag=True,
    default=False,
    help="Suppress information sent to stderr.",
)
@click.option(
    "-s",
    "--silent",
    "_silent",
    envvar="RUBRIK_SILENT",
    is_flag=True,
    default=False,
    help="Suppress information sent to stdout and stderr.",
)
@click.option(
    "-t",
    "--timeout",
    "_timeout",
    envvar="RUBRIK_TIMEOUT",
    type=int,
    default=None,
    help="Override the API request timeout in seconds.",
)
@click.option(
    "--colour",
    "--color",
    "_colour",
    envvar="RUBRIK_COLOUR",
    is_flag=True,
    default=False,
    help="Force colourized output.",
)
@click.option(
    "--version",
    is_flag=True,
    callback=version,
    expose_value=False,
    is_eager=True,
    help="Show CLI version and exit.",
)
def cli(
    _connection,
    _debug,
    _quiet,
    _silent,
    _timeout,
    _colour,
):
    """
    Rubrik CDM CLI management tool

    Environment variables:

      "RUBRIK_CONNECTION": Set the connection to access instead of using --connection/-c

      "RUBRIK_DEBUG": Enable additional debugging details instead of using --debug/-v

      "RUBRIK_QUIET": Suppress stderr output from client instead of using --quiet/-q

      "RUBRIK_SILENT": Suppress stdout and stderr output from client instead of using --silent/-s

      "RUBRIK_TIMEOUT": Override the API request timeout instead of using --timeout/-t

      "RUBRIK_COLOUR": Force colour on the output even if Click determines it is not a console (e.g. with 'watch')

    If a "-c"/"--connection"/"RUBRIK_CONNECTION" is not specified, the CLI will build a connection from
    the "rubrik_cdm_node_ip", "rubrik_cdm_username", "rubrik_cdm_password" and "rubrik_cdm_token"
    environment variables. If these are not set, the command will abort with an error. This applies to
    all commands except those under "connection".
    """

    global CLI_CONFIG
    CLI_CONFIG["quiet"] = _quiet
    CLI_CONFIG["silent"] = _silent

    cli_client_dir = environ.get("RUBRIK_CLIENT_DIR", None)
    home_dir = environ.get("HOME", None)
    if cli_client_dir:
        store_path = cli_client_dir
    elif home_dir:
        store_path = f"{home_dir}/.config/rubrik"
    else:
        echo(
            CLI_CONFIG,
            "WARNING: No client or home configuration directory found; using /tmp instead",
            stderr=True,
        )
        store_path = "/tmp/rubrik"

    if not path.isdir(store_path):
        makedirs(store_path)

    if not path.isfile(f"{store_path}/{DEFAULT_STORE_FILENAME}"):
        update_store(store_path, dict())

    store_data = get_store(store_path)

    # If the connection isn't in the store, mark it bad but pass the value
    if _connection is not None and _connection not in store_data.keys():
        CLI_CONFIG = {"badcfg": True, "connection": _connection}
    else:
        CLI_CONFIG = get_config(store_data, _connection)

    CLI_CONFIG["quiet"] = _quiet
    CLI_CONFIG["silent"] = _silent
    CLI_CONFIG["colour"] = _colour
    CLI_CONFIG["store_path"] = store_path
    if not CLI_CONFIG.get("badcfg", None):
        CLI_CONFIG["debug"] = _debug
        CLI_CONFIG["timeout"] = _timeout


###############################################################################
# Click command tree
###############################################################################

cli_cluster.add_command(cli_cluster_version)
cli_cluster.add_command(cli_cluster_nodes)
cli.add_command(cli_cluster)
cli_object.add_command(cli_object_id)
cli.add_command(cli_object)
cli_sla.add_command(cli_sla_assign)
cli_sla.add_command(cli_sla_objects)
cli.add_command(cli_sla)
cli_volume.add_command(cli_volume_begin)
cli_volume.add_command(cli_volume_end)
cli.add_command(cli_volume)
cli_vm.add_command(cli_vm_pause)
cli_vm.add_command(cli_vm_resume)
cli_vm.add_command(cli_vm_snapshot)
cli.add_command(cli_vm)
cli_physical.add_command(cli_physical_snapshot)
cli.add_command(cli_physical)
cli_connection.add_command(cli_connection_add)
cli_connection.add_command(cli_connection_remove)
cli_connection.add_command(cli_connection_list)
cli.add_command(cli_connection)


#
# Main entry point
#
def main():
    return cli(obj={})


if __name__ == "__main__":
    main()
