"""
Unit tests for mount strategy selection and the AUTO fallback chain
"""

from unittest.mock import Mock

import pytest

from simpleboot.models import MountMethod, MountOutcome, MountRequest
from simpleboot.services import MountStrategySelector, build_drivers
from tests.fakes import legacy_kernel, bare_kernel


def _mock_driver(method, outcome, calls):
    driver = Mock()

    def mount(request):
        calls.append(method)
        return outcome

    driver.mount.side_effect = mount
    return driver


def _selector(outcomes, calls):
    return MountStrategySelector({
        method: _mock_driver(method, outcome, calls) for method, outcome in outcomes.items()
    })


@pytest.fixture
def request_auto(image):
    return MountRequest(image)


def test_auto_stops_at_first_success(request_auto):
    calls = []
    selector = _selector({
        MountMethod.CONFIGFS: MountOutcome.ok('Mounted using ConfigFS (USB_HDD).'),
        MountMethod.LEGACY: MountOutcome.ok('Mounted using Legacy method.'),
        MountMethod.LOOPBACK: MountOutcome.ok('Loopback mounted.'),
    }, calls)

    outcome = selector.execute(request_auto)

    assert outcome.message == 'Mounted using ConfigFS (USB_HDD).'
    assert calls == [MountMethod.CONFIGFS]


def test_auto_order_and_last_failure_returned(request_auto):
    calls = []
    selector = _selector({
        MountMethod.CONFIGFS: MountOutcome.failure('ConfigFS not found.'),
        MountMethod.LEGACY: MountOutcome.failure('Legacy USB gadget interface not found.'),
        MountMethod.LOOPBACK: MountOutcome.failure('No available loop device.'),
    }, calls)

    outcome = selector.execute(request_auto)

    assert calls == [MountMethod.CONFIGFS, MountMethod.LEGACY, MountMethod.LOOPBACK]
    assert not outcome.success
    assert outcome.message == 'No available loop device.'


def test_auto_falls_through_to_legacy(request_auto):
    calls = []
    selector = _selector({
        MountMethod.CONFIGFS: MountOutcome.failure('ConfigFS not found.'),
        MountMethod.LEGACY: MountOutcome.ok('Mounted using Legacy method.'),
        MountMethod.LOOPBACK: MountOutcome.ok('Loopback mounted.'),
    }, calls)

    assert selector.execute(request_auto).message == 'Mounted using Legacy method.'
    assert calls == [MountMethod.CONFIGFS, MountMethod.LEGACY]


def test_explicit_method_bypasses_fallback(image):
    calls = []
    selector = _selector({
        MountMethod.CONFIGFS: MountOutcome.failure('No UDC controller found.'),
        MountMethod.LOOPBACK: MountOutcome.ok('Loopback mounted.'),
    }, calls)

    outcome = selector.execute(MountRequest(image, method=MountMethod.CONFIGFS))

    assert outcome.message == 'No UDC controller found.'
    assert calls == [MountMethod.CONFIGFS]


def test_vendor_variant_not_in_auto_chain():
    assert MountMethod.VENDOR_VARIANT not in MountStrategySelector.AUTO_ORDER


def test_select_unknown_method():
    with pytest.raises(ValueError):
        MountStrategySelector({}).select(MountMethod.LOOPBACK)


def test_auto_with_real_drivers_on_legacy_kernel(config, image):
    selector = MountStrategySelector(build_drivers(legacy_kernel(), config))

    outcome = selector.execute(MountRequest(image))

    assert outcome.success
    assert outcome.method is MountMethod.LEGACY


def test_auto_with_real_drivers_on_bare_kernel(config, image):
    selector = MountStrategySelector(build_drivers(bare_kernel(), config))

    outcome = selector.execute(MountRequest(image))

    assert outcome.success
    assert outcome.method is MountMethod.LOOPBACK
    assert outcome.loop_device == '/dev/block/loop0'
