"""
Tests for import obligations and the idempotent ledger.
"""

from request_switcheroo.core.obligations import ImportLedger, ImportObligation, emit_import


def test_obligation_splits_module_and_name():
  ob = emit_import("pkg.model.GetObjectRequest")
  assert ob.type_name == "pkg.model.GetObjectRequest"
  assert ob.module == "pkg.model"
  assert ob.name == "GetObjectRequest"


def test_unqualified_obligation_has_no_module():
  ob = emit_import("GetObjectRequest")
  assert ob.module == ""
  assert ob.name == "GetObjectRequest"


def test_ledger_is_idempotent():
  ledger = ImportLedger()
  assert not ledger
  assert ledger.request(emit_import("pkg.model.GetObjectRequest")) is True
  assert ledger.request(emit_import("pkg.model.GetObjectRequest")) is False
  assert len(ledger) == 1
  assert list(ledger) == [ImportObligation("pkg.model.GetObjectRequest")]


def test_ledger_groups_by_module_sorted():
  ledger = ImportLedger()
  for type_name in (
    "pkg.model.PutObjectRequest",
    "pkg.model.analytics.AnalyticsFilter",
    "pkg.model.DeleteObjectRequest",
  ):
    ledger.request(emit_import(type_name))

  assert ledger.by_module() == {
    "pkg.model": ["DeleteObjectRequest", "PutObjectRequest"],
    "pkg.model.analytics": ["AnalyticsFilter"],
  }
