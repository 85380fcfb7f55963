import unittest

from rubrik_cdm.lib import sla
from rubrik_cdm.lib.common import UsageError
from rubrik_cdm.lib.sla import SLATarget

from fakeapi import CONFIG, FakeAPI, listing


class TestSLATarget(unittest.TestCase):

    def test_explicit(self):
        self.assertEqual(SLATarget.from_name("Gold"), SLATarget(sla.EXPLICIT, "Gold"))

    def test_sentinels(self):
        accepted = (sla.UNPROTECTED, sla.INHERIT, sla.CURRENT)
        self.assertEqual(SLATarget.from_name("do not protect", accepted).kind, sla.UNPROTECTED)
        self.assertEqual(SLATarget.from_name("clear", accepted).kind, sla.INHERIT)
        self.assertEqual(SLATarget.from_name("current", accepted).kind, sla.CURRENT)

    def test_sentinel_not_accepted_is_a_name(self):
        target = SLATarget.from_name("current", sentinels=(sla.UNPROTECTED,))
        self.assertEqual(target, SLATarget(sla.EXPLICIT, "current"))

    def test_invalid_kind(self):
        with self.assertRaises(UsageError):
            SLATarget("bogus")

    def test_explicit_requires_name(self):
        with self.assertRaises(UsageError):
            SLATarget(sla.EXPLICIT)


class TestSLAID(unittest.TestCase):

    def setUp(self):
        self.api = FakeAPI()
        patcher = self.api.patch()
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_explicit_lookup(self):
        self.api.add("get", "v1", "/sla_domain", listing({"id": "sla-gold", "name": "Gold"}))
        self.assertEqual(sla.sla_id(CONFIG, SLATarget(sla.EXPLICIT, "Gold")), "sla-gold")

    def test_sentinel_ids(self):
        self.assertEqual(sla.sla_id(CONFIG, SLATarget(sla.UNPROTECTED)), "UNPROTECTED")
        self.assertEqual(sla.sla_id(CONFIG, SLATarget(sla.INHERIT)), "INHERIT")
        self.assertEqual(self.api.calls, [])

    def test_current_needs_object(self):
        with self.assertRaises(UsageError):
            sla.sla_id(CONFIG, SLATarget(sla.CURRENT))
