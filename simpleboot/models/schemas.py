"""Data schemas for mount requests, outcomes and resolved environments"""

import os
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional, Dict, Any

from simpleboot.constants import NO_OUTPUT_MESSAGE


class MountMethod(Enum):
    """How the image is exposed to the host"""
    AUTO = 'auto'                      # ConfigFS -> Legacy -> Loopback
    CONFIGFS = 'configfs'
    LEGACY = 'legacy'
    LOOPBACK = 'loopback'
    VENDOR_VARIANT = 'vendor_variant'  # ConfigFS tuned for Pixel (Tensor/GKI)

    @property
    def label(self) -> str:
        return {
            MountMethod.AUTO: 'auto',
            MountMethod.CONFIGFS: 'configfs',
            MountMethod.LEGACY: 'legacy',
            MountMethod.LOOPBACK: 'loopback',
            MountMethod.VENDOR_VARIANT: 'pixel',
        }[self]


class PresentationMode(Enum):
    """How the gadget presents the LUN to the host"""
    READ_ONLY_DISK = 'read_only_disk'  # ro=1, cdrom=0
    OPTICAL = 'optical'                # ro=1, cdrom=1 (deprecated)

    @property
    def deprecated(self) -> bool:
        return self is PresentationMode.OPTICAL

    @property
    def cdrom_flag(self) -> int:
        return 1 if self is PresentationMode.OPTICAL else 0

    @property
    def read_only_flag(self) -> int:
        return 1

    @property
    def label(self) -> str:
        return 'CD_ROM' if self is PresentationMode.OPTICAL else 'USB_HDD'


class MountPhase(Enum):
    """Mount state machine"""
    IDLE = 'idle'
    PROBING = 'probing'
    CONFIGURING = 'configuring'
    ACTIVE = 'active'
    FAILED = 'failed'
    CLEANED_UP = 'cleaned_up'


@dataclass
class MountRequest:
    """Mount request schema"""
    image_path: str
    method: MountMethod = MountMethod.AUTO
    presentation_mode: PresentationMode = PresentationMode.READ_ONLY_DISK
    lun: int = 0

    def __post_init__(self):
        self.method = MountMethod(self.method)
        self.presentation_mode = PresentationMode(self.presentation_mode)
        if self.image_path:
            self.image_path = os.path.abspath(self.image_path)

    @property
    def file_name(self) -> str:
        return os.path.basename(self.image_path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'image_path': self.image_path,
            'method': self.method.value,
            'presentation_mode': self.presentation_mode.value,
            'lun': self.lun,
        }


@dataclass
class ResolvedEnvironment:
    """Kernel facilities resolved for a single mount attempt"""
    configfs_root: Optional[str] = None
    gadget_path: Optional[str] = None
    function_path: Optional[str] = None
    lun_path: Optional[str] = None
    config_dir: Optional[str] = None
    udc_name: Optional[str] = None
    loop_setup_binary: Optional[str] = None
    loop_device: Optional[str] = None

    @property
    def config_path(self) -> Optional[str]:
        if not self.gadget_path or not self.config_dir:
            return None
        return f"{self.gadget_path}/configs/{self.config_dir}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MountRecord:
    """Persisted record of the image currently exposed"""
    image_path: str
    loop_device: str
    lun: str
    mounted_at: int

    @property
    def file_name(self) -> str:
        return os.path.basename(self.image_path)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MountOutcome:
    """Mount/unmount response schema"""
    success: bool
    message: str
    loop_device: Optional[str] = None
    method: Optional[MountMethod] = None
    cleaned_up: bool = False

    def __post_init__(self):
        if not self.message or not self.message.strip():
            self.message = NO_OUTPUT_MESSAGE if not self.success else 'OK'

    @classmethod
    def ok(cls, message: str, loop_device: Optional[str] = None,
           method: Optional[MountMethod] = None) -> 'MountOutcome':
        return cls(True, message, loop_device=loop_device, method=method)

    @classmethod
    def failure(cls, message: str, method: Optional[MountMethod] = None,
                cleaned_up: bool = False) -> 'MountOutcome':
        return cls(False, message, method=method, cleaned_up=cleaned_up)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['method'] = self.method.value if self.method else None
        return data


class BindKind(Enum):
    DIRECT = 'direct'
    LOOP = 'loop'
    FAILED = 'failed'


@dataclass(frozen=True)
class BindResult:
    """Result of binding the backing store to a logical unit"""
    kind: BindKind
    target: Optional[str] = None
    diagnostic: str = field(default='')

    @classmethod
    def direct(cls, image_path: str) -> 'BindResult':
        return cls(BindKind.DIRECT, image_path)

    @classmethod
    def loop(cls, loop_device: str) -> 'BindResult':
        return cls(BindKind.LOOP, loop_device)

    @classmethod
    def failed(cls, diagnostic: str) -> 'BindResult':
        return cls(BindKind.FAILED, None, diagnostic or NO_OUTPUT_MESSAGE)

    @property
    def bound(self) -> bool:
        return self.kind is not BindKind.FAILED


@dataclass
class ImageFile:
    """An ISO or IMG file available for mounting"""
    name: str
    path: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
