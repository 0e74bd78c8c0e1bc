from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chronicles.domain.live.stream.stream_models import (
    GameLiveStatus,
    StreamSession,
    StreamTokenResult,
)


class _CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LiveGamesOut(_CamelOut):
    games: list[GameLiveStatus]
    total: int


class StreamLookupOut(_CamelOut):
    is_live: bool
    stream: StreamSession | None = None


class StreamHistoryOut(_CamelOut):
    streams: list[StreamSession]


class StreamTokenOut(StreamTokenResult):
    pass


class WebhookReceivedOut(_CamelOut):
    received: bool = True
