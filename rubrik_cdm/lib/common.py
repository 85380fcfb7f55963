#!/usr/bin/env python3

# common.py - Rubrik CDM client function library, Common functions
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

from click import echo
from requests import get as requests_get
from requests import post as requests_post
from requests import patch as requests_patch
from requests.exceptions import RequestException
from urllib3 import disable_warnings

VERSION = "1.0.0"

# Base timeout for every API call, in seconds
DEFAULT_TIMEOUT = 15
# Timeout used by slow operations (snapshots, pause/resume) unless overridden
LONG_TIMEOUT = 180


#
# Exceptions
#
class RubrikError(Exception):
    """
    Base exception for all errors raised by the Rubrik CDM client library.
    """

    pass


class UsageError(RubrikError):
    """
    An exception that results from some argument being un- or mis-defined; raised before any API call.
    """

    pass


class NotFoundError(RubrikError):
    """
    An exception that results from an object not being present on the Rubrik cluster.
    """

    pass


class AmbiguousError(RubrikError):
    """
    An exception that results from more than one object matching a given name.
    """

    pass


class APIError(RubrikError):
    """
    An exception that results from a failed request to the Rubrik API.
    """

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(RubrikError):
    """
    An exception that results from an API response not having the expected shape.
    """

    pass


def resolve_timeout(config, timeout=None, default=None):
    """
    Determine the timeout for a single call

    Precedence: an explicit {timeout} from the caller, then the operation {default}, then the
    connection "timeout" setting, then DEFAULT_TIMEOUT.
    """
    if timeout is not None:
        return timeout
    if default is not None:
        return default
    if config.get("timeout") is not None:
        return config["timeout"]
    return DEFAULT_TIMEOUT


def call_api(
    config,
    operation,
    api_version,
    request_uri,
    params=None,
    data=None,
    timeout=None,
):
    # Craft the URI
    uri = "https://{}/api/{}{}".format(config["node_ip"], api_version, request_uri)

    # Add custom User-Agent header
    headers = {
        "User-Agent": f"rubrik-cdm-client/{VERSION}",
        "Accept": "application/json",
    }

    # Craft the authentication header; a token takes precedence over basic auth
    auth = None
    if config.get("api_token"):
        headers["Authorization"] = "Bearer {}".format(config["api_token"])
    else:
        auth = (config.get("username"), config.get("password"))

    timeout = resolve_timeout(config, timeout)

    # Determine the request type and hit the API
    if not config.get("verify_ssl", False):
        disable_warnings()
    try:
        if operation == "get":
            response = requests_get(
                uri,
                timeout=timeout,
                headers=headers,
                auth=auth,
                params=params,
                verify=config.get("verify_ssl", False),
            )
        elif operation == "post":
            response = requests_post(
                uri,
                timeout=timeout,
                headers=headers,
                auth=auth,
                params=params,
                json=data,
                verify=config.get("verify_ssl", False),
            )
        elif operation == "patch":
            response = requests_patch(
                uri,
                timeout=timeout,
                headers=headers,
                auth=auth,
                params=params,
                json=data,
                verify=config.get("verify_ssl", False),
            )
        else:
            raise UsageError(f"Unsupported API operation '{operation}'")
    except RequestException as e:
        raise APIError("Failed to connect to the API: {}".format(e))

    # Display debug output
    if config.get("debug", False):
        echo("API endpoint: {} {}".format(operation.upper(), uri), err=True)
        echo("API params: {}".format(params), err=True)
        echo("Response code: {}".format(response.status_code), err=True)
        echo("Response headers: {}".format(response.headers), err=True)
        echo(err=True)

    # Return the response object
    return response


def decode_response(response):
    """
    Check the status of {response} and return its decoded JSON body
    """
    if response.status_code < 200 or response.status_code > 299:
        try:
            message = response.json().get("message", "")
        except Exception:
            message = response.text
        raise APIError(
            f"API request failed with code {response.status_code}: {message}",
            status_code=response.status_code,
        )

    if response.status_code == 204 or not response.content:
        return dict()

    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(f"Unable to decode the API response as JSON: {e}")


def get(config, api_version, endpoint, params=None, timeout=None):
    """
    Perform a GET against {endpoint} and return the decoded JSON body
    """
    response = call_api(
        config, "get", api_version, endpoint, params=params, timeout=timeout
    )
    return decode_response(response)


def post(config, api_version, endpoint, data=None, params=None, timeout=None):
    """
    Perform a POST of {data} against {endpoint} and return the decoded JSON body
    """
    response = call_api(
        config,
        "post",
        api_version,
        endpoint,
        params=params,
        data=data,
        timeout=timeout,
    )
    return decode_response(response)


def patch(config, api_version, endpoint, data=None, params=None, timeout=None):
    """
    Perform a PATCH of {data} against {endpoint} and return the decoded JSON body
    """
    response = call_api(
        config,
        "patch",
        api_version,
        endpoint,
        params=params,
        data=data,
        timeout=timeout,
    )
    return decode_response(response)
