"""Kernel paths and well-known names used when composing the USB gadget"""

# ConfigFS
CONFIGFS_ROOTS = ('/sys/kernel/config', '/config')
CONFIGFS_DEFAULT_MOUNT = '/sys/kernel/config'
USB_GADGET_DIR = 'usb_gadget'
MASS_STORAGE_FUNCTIONS = ('mass_storage.0', 'mass_storage.usb0', 'msc.0')
DEFAULT_CONFIG_DIR = 'b.1'
GADGET_STRINGS_DIR = 'strings/0x409'

# USB Device Controller class directory
UDC_CLASS_PATH = '/sys/class/udc'

# Legacy android_usb gadget (pre-ConfigFS kernels)
LEGACY_USB_PATH = '/sys/class/android_usb/android0'
LEGACY_LUN_PATH = LEGACY_USB_PATH + '/f_mass_storage/lun'
LEGACY_LUN_FILE = LEGACY_LUN_PATH + '/file'

# Loop devices
LOOP_SETUP_CANDIDATES = (
    'losetup',
    '/system/bin/losetup',
    'toybox losetup',
    '/system/bin/toybox losetup',
    'busybox losetup',
    '/system/xbin/busybox losetup',
)
LOOP_DETACH_TOOLS = ('losetup', 'toybox losetup', 'busybox losetup')
LOOP_MAX_LOOP_PARAM = '/sys/module/loop/parameters/max_loop'
LOOP_MAX_COUNT = 64
LOOP_CONTROL_NODE = '/dev/block/loop-control'
LOOP_NODE_PREFIX = '/dev/block/loop'
LOOP_NODE_COUNT = 16

KERNEL_MODULES = ('loop', 'libcomposite', 'usb_f_mass_storage', 'g_mass_storage')

# Host-facing USB composition
USB_CONFIG_PROP = 'sys.usb.config'
USB_STATE_PROP = 'sys.usb.state'
USB_COMPOSITION_NONE = 'none'
USB_COMPOSITION_DEFAULT = 'mass_storage,adb'
USB_COMPOSITION_NO_ADB = 'mass_storage'
USB_CHARGE_NODE = '/sys/class/power_supply/usb/device/charge'

NO_OUTPUT_MESSAGE = 'Shell command failed (no output).'

IMAGE_EXTENSIONS = ('iso', 'img')
LOG_FILE_PREFIX = 'mount_log_'
LOG_FILE_DATE_FORMAT = '%Y%m%d'
