"""
Unit tests for the cleanup coordinator
"""

from simpleboot.gadget import CleanupCoordinator, CleanupStep
from tests.fakes import bare_kernel


def test_step_rendering():
    assert CleanupStep('sync').render() == 'sync || true'
    assert CleanupStep('sync', ignore_failure=False).render() == 'sync'


def test_covers_every_configfs_root_and_legacy():
    commands = [step.render() for step in CleanupCoordinator.build_steps()]

    for root in ('/sys/kernel/config', '/config'):
        assert f"find {root}/usb_gadget/*/configs -type l -delete 2>/dev/null || true" in commands
        assert f"rm -rf {root}/usb_gadget/*/functions/mass_storage.* 2>/dev/null || true" \
            in commands
    assert "echo 0 > /sys/class/android_usb/android0/enable 2>/dev/null || true" in commands
    assert "echo '' > /sys/class/android_usb/android0/f_mass_storage/lun/file " \
           "2>/dev/null || true" in commands


def test_restores_default_usb_composition_last():
    commands = [step.render() for step in CleanupCoordinator.build_steps('/dev/block/loop0')]

    assert commands[-2:] == [
        'setprop sys.usb.config mass_storage,adb || true',
        'setprop sys.usb.state mass_storage,adb || true',
    ]


def test_detaches_loop_with_every_utility():
    commands = [step.render() for step in CleanupCoordinator.build_steps('/dev/block/loop7')]

    for tool in ('losetup', 'toybox losetup', 'busybox losetup'):
        assert f"{tool} -d /dev/block/loop7 2>/dev/null || true" in commands


def test_no_detach_without_loop_device():
    commands = [step.render() for step in CleanupCoordinator.build_steps()]
    assert not any(' -d ' in command for command in commands)


def test_every_step_tolerates_failure():
    assert all(step.ignore_failure for step in CleanupCoordinator.build_steps('/dev/block/loop0'))


def test_run_is_best_effort_and_repeatable():
    executor = bare_kernel()
    cleanup = CleanupCoordinator(executor)

    first = cleanup.run('/dev/block/loop0')
    second = cleanup.run('/dev/block/loop0')

    assert first.success and second.success
    assert len(executor.batches) == 2
    assert executor.batches[0] == executor.batches[1]
    assert executor.batches[0][1] is False
