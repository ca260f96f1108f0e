"""Models package"""

from simpleboot.models.schemas import (
    MountMethod,
    PresentationMode,
    MountPhase,
    MountRequest,
    ResolvedEnvironment,
    MountRecord,
    MountOutcome,
    BindKind,
    BindResult,
    ImageFile,
)
from simpleboot.models.database import (
    Base,
    MountStateEntry,
    DatabaseManager,
)

__all__ = [
    'MountMethod',
    'PresentationMode',
    'MountPhase',
    'MountRequest',
    'ResolvedEnvironment',
    'MountRecord',
    'MountOutcome',
    'BindKind',
    'BindResult',
    'ImageFile',
    'Base',
    'MountStateEntry',
    'DatabaseManager',
]
