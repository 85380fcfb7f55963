import unittest

from rubrik_cdm.lib.common import DecodeError
from rubrik_cdm.lib.models import (AsyncRequest, ManagedVolumeSummary, ObjectList, VMSummary,
                                   require_field)

from fakeapi import job, listing, vm_summary


class TestRequireField(unittest.TestCase):

    def test_present(self):
        self.assertEqual(require_field({"a": "b"}, "a", str, "test"), "b")

    def test_missing(self):
        with self.assertRaises(DecodeError):
            require_field({}, "a", str, "test")

    def test_wrong_type(self):
        with self.assertRaises(DecodeError):
            require_field({"a": 1}, "a", str, "test")

    def test_bool_is_not_a_number(self):
        with self.assertRaises(DecodeError):
            require_field({"total": True}, "total", (int, float), "test")

    def test_not_an_object(self):
        with self.assertRaises(DecodeError):
            require_field(["a"], "a", str, "test")


class TestModels(unittest.TestCase):

    def test_object_list(self):
        result = ObjectList.from_json(listing({"id": "a"}))
        self.assertEqual(result.total, 1)
        self.assertEqual(result.data, [{"id": "a"}])

    def test_object_list_float_total(self):
        self.assertEqual(ObjectList.from_json({"total": 2.0, "data": []}).total, 2)

    def test_object_list_bad_entry(self):
        with self.assertRaises(DecodeError):
            ObjectList.from_json({"total": 1, "data": ["a"]})

    def test_vm_summary(self):
        summary = VMSummary.from_json(vm_summary(configured="INHERIT", effective="sla-1",
                                                 paused=True))
        self.assertEqual(summary.configured_sla_domain_id, "INHERIT")
        self.assertEqual(summary.effective_sla_domain_id, "sla-1")
        self.assertTrue(summary.is_snappable_blackout_active)

    def test_vm_summary_bad_blackout_flag(self):
        data = vm_summary()
        data["blackoutWindowStatus"]["isSnappableBlackoutActive"] = "yes"
        with self.assertRaises(DecodeError):
            VMSummary.from_json(data)

    def test_managed_volume_summary(self):
        with self.assertRaises(DecodeError):
            ManagedVolumeSummary.from_json({"id": "mv-1", "name": "mv1"})

    def test_async_request(self):
        self.assertEqual(AsyncRequest.from_json(job("https://job/1")).href, "https://job/1")

    def test_async_request_without_links(self):
        with self.assertRaises(DecodeError):
            AsyncRequest.from_json({"id": "job-1"})
