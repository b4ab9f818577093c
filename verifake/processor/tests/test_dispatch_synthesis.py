# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import ast

from verifake.processor.dispatch import dispatch_entries, synthesize_dispatch
from verifake.processor.fake_class import synthesize_fake
from verifake.processor.model import InterfaceDescriptor


def _iface(module: str, name: str) -> InterfaceDescriptor:
	package = module.rpartition(".")[0]
	return InterfaceDescriptor(
		qualified_name=f"{module}.{name}",
		simple_name=name,
		qualname=name,
		module=module,
		package=package,
		operations=(),
	)


def _pairs(*ifaces: InterfaceDescriptor):
	return [(i, synthesize_fake(i)) for i in ifaces]


def test_empty_pass_produces_no_dispatch_module():
	assert synthesize_dispatch([]) is None


def test_dispatch_module_location_and_entries():
	unit = synthesize_dispatch(_pairs(_iface("shop.api", "Analytics"), _iface("mailer", "Mailer")))

	assert unit is not None
	assert unit.qualified_module == "verifake_generated.Fakes"
	assert unit.relative_path.as_posix() == "verifake_generated/Fakes.py"
	ast.parse(unit.text)
	assert "from shop.Analytics_Fake import Analytics_Fake as shop_Analytics_Fake" in unit.text
	assert "from Mailer_Fake import Mailer_Fake as _root_Mailer_Fake" in unit.text
	assert "\t'shop.api.Analytics': shop_Analytics_Fake,\n" in unit.text
	assert "\t'mailer.Mailer': _root_Mailer_Fake,\n" in unit.text
	assert "def fake_for(identity: str) -> object:" in unit.text
	assert "def fake(cls: type[T]) -> T:" in unit.text


def test_equally_named_fakes_get_distinct_aliases():
	entries = dispatch_entries(
		_pairs(
			_iface("shop.api", "Analytics"),
			_iface("admin.api", "Analytics"),
			_iface("shop.other", "Analytics"),
		)
	)

	assert [e.identity for e in entries] == [
		"shop.api.Analytics",
		"admin.api.Analytics",
		"shop.other.Analytics",
	]
	assert [e.alias for e in entries] == [
		"shop_Analytics_Fake",
		"admin_Analytics_Fake",
		"shop_Analytics_Fake_2",
	]
	assert len({e.alias for e in entries}) == 3
