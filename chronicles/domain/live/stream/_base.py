"""Base service for stream operations."""

from chronicles.app_config import AppEnvironConfig, get_app_environ_config
from chronicles.services.integrations.livekit_service import LivekitService, livekit_service

from ._repository import LiveStateRepository


class BaseService:
    """Base service with the collaborators shared by stream operations."""

    def __init__(
        self,
        repository: LiveStateRepository | None = None,
        livekit: LivekitService | None = None,
        cfg: AppEnvironConfig | None = None,
    ):
        self.repository = repository or LiveStateRepository()
        self.livekit = livekit or livekit_service
        self.cfg = cfg or get_app_environ_config()
