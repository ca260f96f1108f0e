"""Loopback-only driver - attaches the image without exposing it over USB"""

from simpleboot.drivers.base import BaseGadgetDriver
from simpleboot.models import MountMethod, MountRequest, MountOutcome, ResolvedEnvironment
from simpleboot.utils.logger import get_logger

LOG = get_logger(__name__)


class LoopbackDriver(BaseGadgetDriver):
    """Read-only loop attachment, useful for local testing."""

    method = MountMethod.LOOPBACK

    def resolve(self, request: MountRequest) -> ResolvedEnvironment:
        return self.resolve_loop(ResolvedEnvironment())

    def configure(self, env: ResolvedEnvironment, request: MountRequest) -> MountOutcome:
        bind = self.bind_via_loop(env, request.image_path)
        if not bind.bound:
            return self.abort(env, bind.diagnostic)

        LOG.info(f"[loopback] Success -> {env.loop_device}")
        return MountOutcome.ok("Loopback mounted.", loop_device=env.loop_device,
                               method=self.method)
