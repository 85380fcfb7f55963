import unittest

from rubrik_cdm.lib.common import AmbiguousError, NotFoundError, UsageError
from rubrik_cdm.lib.objects import object_id, VALID_OBJECT_TYPES

from fakeapi import CONFIG, FakeAPI, listing


# (object type, API version, list endpoint, name field, extra resolver kwargs)
TYPE_ROUTES = [
    ("vmware", "v1", "/vmware/vm", "name", {}),
    ("sla", "v1", "/sla_domain", "name", {}),
    ("vmwareHost", "v1", "/vmware/host", "name", {}),
    ("physicalHost", "v1", "/host", "hostname", {}),
    ("filesetTemplate", "v1", "/fileset_template", "name", {"host_os": "Linux"}),
    ("managedVolume", "internal", "/managed_volume", "name", {}),
]


class TestObjectID(unittest.TestCase):

    def setUp(self):
        self.api = FakeAPI()
        patcher = self.api.patch()
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_all_types_covered(self):
        self.assertEqual(sorted(t[0] for t in TYPE_ROUTES), sorted(VALID_OBJECT_TYPES))

    def test_single_exact_match(self):
        for object_type, version, endpoint, field, kwargs in TYPE_ROUTES:
            with self.subTest(object_type=object_type):
                self.api.routes = []
                self.api.add("get", version, endpoint, listing(
                    {"id": "wrong-1", field: "target-clone"},
                    {"id": "right-1", field: "target"},
                ))
                self.assertEqual(object_id(CONFIG, "target", object_type, **kwargs), "right-1")

    def test_no_exact_match(self):
        for object_type, version, endpoint, field, kwargs in TYPE_ROUTES:
            with self.subTest(object_type=object_type):
                self.api.routes = []
                self.api.add("get", version, endpoint, listing({"id": "x", field: "target2"}))
                with self.assertRaises(NotFoundError):
                    object_id(CONFIG, "target", object_type, **kwargs)

    def test_empty_listing(self):
        self.api.add("get", "v1", "/vmware/vm", listing())
        with self.assertRaises(NotFoundError) as ctx:
            object_id(CONFIG, "vm1", "vmware")
        self.assertIn("'vm1' was not found", str(ctx.exception))

    def test_multiple_exact_matches(self):
        for object_type, version, endpoint, field, kwargs in TYPE_ROUTES:
            with self.subTest(object_type=object_type):
                self.api.routes = []
                self.api.add("get", version, endpoint, listing(
                    {"id": "a", field: "target"},
                    {"id": "b", field: "target"},
                ))
                with self.assertRaises(AmbiguousError):
                    object_id(CONFIG, "target", object_type, **kwargs)

    def test_query_filters(self):
        self.api.add("get", "v1", "/vmware/vm", listing({"id": "vm-1", "name": "vm1"}))
        object_id(CONFIG, "vm1", "vmware")
        self.assertEqual(self.api.calls[0].params,
                         {"primary_cluster_id": "local", "is_relic": "false", "name": "vm1"})

    def test_fileset_template_query_includes_os(self):
        self.api.add("get", "v1", "/fileset_template",
                     listing({"id": "ft-1", "name": "etc"}))
        object_id(CONFIG, "etc", "filesetTemplate", host_os="Windows")
        self.assertEqual(self.api.calls[0].params["operating_system_type"], "Windows")

    def test_physical_host_matches_hostname(self):
        self.api.add("get", "v1", "/host", listing({"id": "h-1", "hostname": "db01",
                                                    "name": "something else"}))
        self.assertEqual(object_id(CONFIG, "db01", "physicalHost"), "h-1")

    def test_invalid_type(self):
        with self.assertRaises(UsageError):
            object_id(CONFIG, "vm1", "hyperv")
        self.assertEqual(self.api.calls, [])

    def test_fileset_template_without_os(self):
        with self.assertRaises(UsageError):
            object_id(CONFIG, "etc", "filesetTemplate")
        self.assertEqual(self.api.calls, [])

    def test_fileset_template_invalid_os(self):
        with self.assertRaises(UsageError):
            object_id(CONFIG, "etc", "filesetTemplate", host_os="AIX")
        self.assertEqual(self.api.calls, [])
