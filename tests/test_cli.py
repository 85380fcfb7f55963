import json
import os
import tempfile
import unittest
from unittest.mock import patch

from click.testing import CliRunner

from rubrik_cdm.cli import helpers
from rubrik_cdm.cli.cli import cli
from rubrik_cdm.cli.parsers import cli_connection_list_parser
from rubrik_cdm.lib.common import AmbiguousError, VERSION


class TempDirTestCase(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tempdir.cleanup)

    def write(self, name, content):
        filename = os.path.join(self.tempdir.name, name)
        with open(filename, "w") as fh:
            fh.write(content)
        return filename


@patch.dict("os.environ", {}, clear=True)
class TestHelpers(TempDirTestCase):

    def test_read_yaml(self):
        cfgfile = self.write("rubrik.yaml", "rubrik:\n  node_ip: 10.0.0.5\n  api_token: tok\n")
        self.assertEqual(helpers.read_config_from_yaml(cfgfile),
                         ("10.0.0.5", None, None, "tok", False))

    def test_read_yaml_missing_section(self):
        cfgfile = self.write("rubrik.yaml", "other:\n  node_ip: 10.0.0.5\n")
        self.assertEqual(helpers.read_config_from_yaml(cfgfile)[0], None)

    def test_static_connection(self):
        store = {"lab": {"node_ip": "10.0.0.1", "username": "admin", "password": "pw",
                         "api_token": None, "verify_ssl": True, "description": "Lab"}}
        config = helpers.get_config(store, "lab")
        self.assertEqual(config["node_ip"], "10.0.0.1")
        self.assertEqual(config["connection"], "lab")
        self.assertTrue(config["verify_ssl"])

    def test_cfgfile_connection(self):
        cfgfile = self.write("rubrik.yaml", "rubrik:\n  node_ip: 10.0.0.5\n  api_token: tok\n")
        config = helpers.get_config({"yaml": {"cfgfile": cfgfile}}, "yaml")
        self.assertEqual(config["node_ip"], "10.0.0.5")
        self.assertEqual(config["api_token"], "tok")

    def test_missing_cfgfile(self):
        store = {"yaml": {"cfgfile": os.path.join(self.tempdir.name, "nope.yaml")}}
        self.assertTrue(helpers.get_config(store, "yaml").get("badcfg"))

    @patch.dict("os.environ", {"rubrik_cdm_node_ip": "10.0.0.7", "rubrik_cdm_token": "tok"},
                clear=True)
    def test_environment_connection(self):
        config = helpers.get_config({}, None)
        self.assertEqual(config["node_ip"], "10.0.0.7")
        self.assertEqual(config["connection"], helpers.DEFAULT_CONNECTION)

    def test_malformed_cfgfile(self):
        cfgfile = self.write("rubrik.yaml", "rubrik: [node_ip: 10.0.0.5\n")
        self.assertEqual(helpers.read_config_from_yaml(cfgfile),
                         (None, None, None, None, False))
        self.assertTrue(helpers.get_config({"yaml": {"cfgfile": cfgfile}}, "yaml").get("badcfg"))

    @patch.dict("os.environ", {"rubrik_cdm_node_ip": "10.0.0.7", "rubrik_cdm_token": "tok",
                               "RUBRIK_CLIENT_VERIFY_SSL": "True"}, clear=True)
    def test_environment_connection_verify_ssl(self):
        config = helpers.get_config({}, None)
        self.assertEqual(config["connection"], helpers.DEFAULT_CONNECTION)
        self.assertTrue(config["verify_ssl"])

    @patch.dict("os.environ", {"RUBRIK_CLIENT_VERIFY_SSL": "False"}, clear=True)
    def test_static_connection_verify_ssl(self):
        store = {"lab": {"node_ip": "10.0.0.1", "api_token": "tok", "verify_ssl": True}}
        self.assertFalse(helpers.get_config(store, "lab")["verify_ssl"])

    @patch.dict("os.environ", {}, clear=True)
    def test_no_connection(self):
        self.assertTrue(helpers.get_config({}, None).get("badcfg"))

    def test_store_roundtrip(self):
        helpers.update_store(self.tempdir.name, {"lab": {"node_ip": "10.0.0.1"}})
        self.assertEqual(helpers.get_store(self.tempdir.name), {"lab": {"node_ip": "10.0.0.1"}})
        mode = os.stat(os.path.join(self.tempdir.name, helpers.DEFAULT_STORE_FILENAME)).st_mode
        self.assertEqual(mode & 0o777, 0o600)


class TestParsers(unittest.TestCase):

    def test_mask_token(self):
        data = cli_connection_list_parser({"lab": {"node_ip": "10.0.0.1", "api_token": "ab-12"}},
                                          False)
        self.assertEqual(data[0]["api_token"], "xx-xx")

    def test_show_token(self):
        data = cli_connection_list_parser({"lab": {"node_ip": "10.0.0.1", "api_token": "ab-12"}},
                                          True)
        self.assertEqual(data[0]["api_token"], "ab-12")


class TestCommands(TempDirTestCase):

    def invoke(self, *args):
        env = {
            "RUBRIK_CLIENT_DIR": self.tempdir.name,
            "RUBRIK_CONNECTION": None,
            "rubrik_cdm_node_ip": "10.0.0.1",
            "rubrik_cdm_username": "admin",
            "rubrik_cdm_password": "secret",
            "rubrik_cdm_token": None,
        }
        return CliRunner().invoke(cli, list(args), env=env)

    @patch("rubrik_cdm.lib.data_management.pause_snapshot")
    def test_pause(self, mock_pause):
        mock_pause.return_value = "No change required. The 'vm1' 'vmware' is already paused."
        result = self.invoke("-q", "vm", "pause", "vm1")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("already paused", result.output)
        config = mock_pause.call_args[0][0]
        self.assertEqual(config["node_ip"], "10.0.0.1")
        self.assertEqual(mock_pause.call_args[0][1:], ("vm1", "vmware"))

    @patch("rubrik_cdm.lib.data_management.pause_snapshot")
    def test_timeout_option(self, mock_pause):
        mock_pause.return_value = {}
        self.invoke("-q", "-t", "30", "vm", "pause", "vm1")
        self.assertEqual(mock_pause.call_args[1]["timeout"], 30)

    @patch("rubrik_cdm.lib.data_management.assign_sla")
    def test_error(self, mock_assign):
        mock_assign.side_effect = AmbiguousError("Multiple vmware objects named 'vm1'")
        result = self.invoke("-q", "sla", "assign", "vm1", "Gold")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: Multiple vmware objects", result.output)

    @patch("rubrik_cdm.lib.data_management.on_demand_snapshot_vm")
    def test_snapshot_json(self, mock_snapshot):
        mock_snapshot.return_value = "https://job/1"
        result = self.invoke("-q", "vm", "snapshot", "vm1", "-f", "json")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output), {"job_status_url": "https://job/1"})
        self.assertEqual(mock_snapshot.call_args[0][1:], ("vm1", "vmware", "current"))

    def test_connection_add_and_list(self):
        result = self.invoke("connection", "add", "lab", "-a", "10.0.0.3", "-k", "tok")
        self.assertEqual(result.exit_code, 0)
        result = self.invoke("connection", "list", "-f", "json")
        self.assertEqual(result.exit_code, 0)
        [connection] = json.loads(result.output)
        self.assertEqual(connection["name"], "lab")
        self.assertEqual(connection["address"], "10.0.0.3")
        self.assertEqual(connection["api_token"], "xxx")

    def test_version(self):
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn(f"version {VERSION}", result.output)

    def test_unknown_connection(self):
        result = self.invoke("-c", "missing", "cluster", "version")
        self.assertEqual(result.exit_code, 1)
        self.assertIn('Invalid connection "missing"', result.output)
