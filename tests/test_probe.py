"""
Unit tests for the environment probe
"""

from simpleboot.gadget import EnvironmentProbe
from tests.fakes import FakeExecutor, configfs_kernel, legacy_kernel, bare_kernel


def test_configfs_root_found_and_gadget_tree_created(config):
    executor = configfs_kernel()
    probe = EnvironmentProbe(executor, config)

    assert probe.find_configfs_root() == '/sys/kernel/config'
    assert '/sys/kernel/config/usb_gadget' in executor.dirs


def test_configfs_root_falls_back_to_second_location(config):
    executor = FakeExecutor(dirs=['/config'])
    probe = EnvironmentProbe(executor, config)

    assert probe.find_configfs_root() == '/config'


def test_configfs_root_missing(config):
    probe = EnvironmentProbe(legacy_kernel(), config)
    assert probe.find_configfs_root() is None


def test_configfs_mount_attempted_before_lookup(config):
    executor = configfs_kernel()
    EnvironmentProbe(executor, config).find_configfs_root()

    assert 'mount -t configfs configfs /sys/kernel/config' in executor.commands[0]


def test_existing_gadget_is_reused(config):
    executor = FakeExecutor(dirs=[
        '/sys/kernel/config',
        '/sys/kernel/config/usb_gadget',
        '/sys/kernel/config/usb_gadget/android',
    ])
    probe = EnvironmentProbe(executor, config)

    assert probe.resolve_gadget_path('/sys/kernel/config') == \
        '/sys/kernel/config/usb_gadget/android'
    assert '/sys/kernel/config/usb_gadget/g1' not in executor.dirs


def test_gadget_created_when_none_exists(config):
    executor = FakeExecutor(dirs=['/sys/kernel/config', '/sys/kernel/config/usb_gadget'])
    probe = EnvironmentProbe(executor, config)

    assert probe.resolve_gadget_path('/sys/kernel/config') == '/sys/kernel/config/usb_gadget/g1'


def test_gadget_path_none_when_creation_fails(config):
    executor = FakeExecutor(dirs=['/sys/kernel/config'])
    probe = EnvironmentProbe(executor, config)

    assert probe.resolve_gadget_path('/sys/kernel/config') is None


def test_function_path_prefers_existing_candidate(config):
    gadget = '/sys/kernel/config/usb_gadget/g1'
    executor = FakeExecutor(dirs=[gadget, f'{gadget}/functions/mass_storage.usb0'])
    probe = EnvironmentProbe(executor, config)

    assert probe.resolve_function_path(gadget) == f'{gadget}/functions/mass_storage.usb0'


def test_function_path_defaults_to_first_candidate(config):
    gadget = '/sys/kernel/config/usb_gadget/g1'
    probe = EnvironmentProbe(FakeExecutor(dirs=[gadget]), config)

    assert probe.resolve_function_path(gadget) == f'{gadget}/functions/mass_storage.0'


def test_lun_path_layouts(config):
    func = '/sys/kernel/config/usb_gadget/g1/functions/mass_storage.0'

    flat = EnvironmentProbe(FakeExecutor(dirs=[func, f'{func}/lun']), config)
    assert flat.resolve_lun_path(func, 0) == f'{func}/lun'

    indexed = EnvironmentProbe(FakeExecutor(dirs=[func, f'{func}/lun', f'{func}/lun.2']), config)
    assert indexed.resolve_lun_path(func, 2) == f'{func}/lun.2'

    missing = EnvironmentProbe(FakeExecutor(dirs=[func]), config)
    assert missing.resolve_lun_path(func, 1) == f'{func}/lun.1'


def test_config_dir_discovered_or_defaulted(config):
    gadget = '/sys/kernel/config/usb_gadget/g1'
    existing = EnvironmentProbe(
        FakeExecutor(dirs=[gadget, f'{gadget}/configs', f'{gadget}/configs/c.1']), config
    )
    assert existing.resolve_config_dir(gadget) == 'c.1'

    empty = EnvironmentProbe(FakeExecutor(dirs=[gadget]), config)
    assert empty.resolve_config_dir(gadget) == 'b.1'


def test_udc_name(config):
    assert EnvironmentProbe(configfs_kernel(), config).resolve_udc_name() == 'musb-hdrc.0'
    assert EnvironmentProbe(bare_kernel(), config).resolve_udc_name() is None


def test_legacy_available(config):
    assert EnvironmentProbe(legacy_kernel(), config).legacy_available()
    assert not EnvironmentProbe(configfs_kernel(), config).legacy_available()


def test_loop_setup_binary_first_working_candidate(config):
    probe = EnvironmentProbe(bare_kernel(losetup=('toybox losetup',)), config)
    assert probe.resolve_loop_setup_binary() == 'toybox losetup'


def test_loop_setup_binary_missing(config):
    probe = EnvironmentProbe(bare_kernel(losetup=()), config)
    assert probe.resolve_loop_setup_binary() is None


def test_modules_loaded_best_effort(config):
    executor = bare_kernel()
    EnvironmentProbe(executor, config).ensure_modules_loaded()

    batch, strict = executor.batches[0]
    assert not strict
    assert 'modprobe libcomposite 2>/dev/null || true' in batch
    assert all(command.endswith('|| true') for command in batch)
