"""Base model shared by every public nowplaying model.

* ``alias_generator=to_camel`` so snake_case fields serialize to the
  camelCase keys browser integrations and widgets speak
  (``position_ms`` <-> ``positionMs``).
* ``populate_by_name=True`` so Python callers can keep using field names.
* Frozen: the store and the command register swap whole objects instead
  of mutating them, so readers never observe a half-applied write.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class NowPlayingModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
