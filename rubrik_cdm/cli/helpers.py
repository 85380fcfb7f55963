#!/usr/bin/env python3

# helpers.py - Rubrik CDM Click CLI helper function library
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

from click import echo as click_echo
from json import load as jload
from json import dump as jdump
from os import chmod, environ, path, get_terminal_size
from yaml import load as yload
from yaml import SafeLoader, YAMLError

from rubrik_cdm.lib.common import UsageError
from rubrik_cdm.lib.connection import connect


DEFAULT_STORE_FILENAME = "rubrik.json"
DEFAULT_CONNECTION = "env"

try:
    # Define the content width to be the maximum terminal size
    MAX_CONTENT_WIDTH = get_terminal_size().columns - 1
except OSError:
    # Fall back to 80 columns if "Inappropriate ioctl for device"
    MAX_CONTENT_WIDTH = 80


def echo(config, message, newline=True, stderr=False):
    """
    Output a message with click.echo respecting our configuration
    """

    if config.get("colour", False):
        colour = True
    else:
        colour = None

    if config.get("silent", False):
        pass
    elif config.get("quiet", False) and stderr:
        pass
    else:
        click_echo(message=message, color=colour, nl=newline, err=stderr)


def read_config_from_yaml(cfgfile):
    """
    Read the Rubrik connection details from a YAML credentials file
    """

    try:
        with open(cfgfile) as fh:
            rubrik_config = yload(fh, Loader=SafeLoader)["rubrik"]

        node_ip = rubrik_config["node_ip"]
        username = rubrik_config.get("username", None)
        password = rubrik_config.get("password", None)
        api_token = rubrik_config.get("api_token", None)
        verify_ssl = rubrik_config.get("verify_ssl", False)
    except (KeyError, TypeError, YAMLError):
        node_ip = None
        username = None
        password = None
        api_token = None
        verify_ssl = False

    return node_ip, username, password, api_token, verify_ssl


def verify_ssl_override(config):
    """
    Apply the RUBRIK_CLIENT_VERIFY_SSL environment override to a connection configuration
    """

    if environ.get("RUBRIK_CLIENT_VERIFY_SSL", None) is not None:
        config["verify_ssl"] = environ.get("RUBRIK_CLIENT_VERIFY_SSL") == "True"

    return config


def get_config(store_data, connection=None):
    """
    Load CLI configuration from store data, or from the environment if no connection is given
    """

    if store_data is None:
        return {"badcfg": True}

    connection_details = store_data.get(connection, None)

    if not connection_details:
        # Fall back to the rubrik_cdm_* environment variables
        try:
            config = connect()
        except UsageError:
            return {"badcfg": True}
        config["connection"] = DEFAULT_CONNECTION
        config["description"] = "Environment variables"
        return verify_ssl_override(config)

    if connection_details.get("cfgfile", None) is not None:
        if path.isfile(connection_details.get("cfgfile", None)):
            node_ip, username, password, api_token, verify_ssl = read_config_from_yaml(
                connection_details.get("cfgfile", None)
            )
            if node_ip is None:
                return {"badcfg": True}
        else:
            return {"badcfg": True}
    else:
        # This is a static configuration, get the details directly
        node_ip = connection_details["node_ip"]
        username = connection_details.get("username", None)
        password = connection_details.get("password", None)
        api_token = connection_details.get("api_token", None)
        verify_ssl = connection_details.get("verify_ssl", False)

    try:
        config = connect(
            node_ip=node_ip,
            username=username,
            password=password,
            api_token=api_token,
            verify_ssl=verify_ssl,
            use_environment=False,
        )
    except UsageError:
        return {"badcfg": True}

    config["connection"] = connection
    config["description"] = connection_details.get("description", "N/A")

    return verify_ssl_override(config)


def get_store(store_path):
    """
    Load store information from the store path
    """

    store_file = f"{store_path}/{DEFAULT_STORE_FILENAME}"

    with open(store_file) as fh:
        try:
            store_data = jload(fh)
        except Exception:
            store_data = dict()

    return store_data


def update_store(store_path, store_data):
    """
    Update store information to the store path, creating it (with sensible permissions) if needed
    """

    store_file = f"{store_path}/{DEFAULT_STORE_FILENAME}"

    if not path.exists(store_file):
        with open(store_file, "w") as fh:
            fh.write("")
        chmod(store_file, int(environ.get("RUBRIK_CLIENT_DB_PERMS", "600"), 8))

    with open(store_file, "w") as fh:
        jdump(store_data, fh, sort_keys=True, indent=4)
