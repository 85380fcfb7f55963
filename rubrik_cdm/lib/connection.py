#!/usr/bin/env python3

# connection.py - Rubrik CDM client function library, connection setup
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

from os import environ

from rubrik_cdm.lib.common import post, UsageError
from rubrik_cdm.lib.models import require_field


ENV_NODE_IP = "rubrik_cdm_node_ip"
ENV_USERNAME = "rubrik_cdm_username"
ENV_PASSWORD = "rubrik_cdm_password"
ENV_TOKEN = "rubrik_cdm_token"


def connect(
    node_ip=None,
    username=None,
    password=None,
    api_token=None,
    verify_ssl=False,
    timeout=None,
    debug=False,
    use_environment=True,
):
    """
    Build the connection configuration used by every library function

    Any of {node_ip}, {username}, {password} and {api_token} that are not given are read from the
    rubrik_cdm_node_ip, rubrik_cdm_username, rubrik_cdm_password and rubrik_cdm_token environment
    variables, unless {use_environment} is False. An API token takes precedence over a username and
    password.
    """
    if use_environment:
        if node_ip is None:
            node_ip = environ.get(ENV_NODE_IP)
        if api_token is None:
            api_token = environ.get(ENV_TOKEN)
        if username is None:
            username = environ.get(ENV_USERNAME)
        if password is None:
            password = environ.get(ENV_PASSWORD)

    if not node_ip:
        raise UsageError(
            f"The Rubrik cluster address must be provided or set in the '{ENV_NODE_IP}' environment variable"
        )
    if not api_token and not (username and password):
        raise UsageError(
            f"An API token ('{ENV_TOKEN}') or a username and password ('{ENV_USERNAME}', '{ENV_PASSWORD}') must be provided"
        )

    config = dict()
    config["node_ip"] = node_ip
    config["username"] = username
    config["password"] = password
    config["api_token"] = api_token
    config["verify_ssl"] = verify_ssl
    config["timeout"] = timeout
    config["debug"] = debug

    return config


def get_session_token(config, timeout=None):
    """
    Create a new API session with the configured username and password and return its token

    API endpoint: POST /api/v1/session
    API arguments:
    API schema: {"id":"{session_id}","token":"{token}","userId":"{user_id}"}
    """
    if not (config.get("username") and config.get("password")):
        raise UsageError("A username and password are required to create a session token")

    # Force basic authentication for the session request itself
    session_config = dict(config)
    session_config["api_token"] = None

    response = post(session_config, "v1", "/session", data=dict(), timeout=timeout)
    return require_field(response, "token", str, "session")
