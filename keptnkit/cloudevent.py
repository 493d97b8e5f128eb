"""Keptn's extended CloudEvent model and paged event lists."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .models import JSONModel, _any, _float, _list, _opt_str, _str, _time


def _default(value: Any) -> Any:
    if isinstance(value, JSONModel):
        return value.to_dict()
    raise TypeError(f"cannot serialise {type(value).__name__}")


@dataclass
class KeptnContextExtendedCE(JSONModel):
    """A CloudEvent carrying Keptn context extensions."""

    contenttype: str = _str("contenttype")
    data: Any = _any("data")
    extensions: Any = _any("extensions", omitempty=True)
    id: str = _str("id")
    shkeptncontext: str = _str("shkeptncontext")
    shkeptnspecversion: str = _str("shkeptnspecversion")
    source: str | None = _opt_str("source")
    specversion: str = _str("specversion")
    time: datetime | None = _time("time")
    triggeredid: str = _str("triggeredid")
    type: str | None = _opt_str("type")

    def data_as(self, target: type) -> Any:
        """Return the payload converted to ``target`` via a JSON round trip."""
        payload = json.loads(json.dumps(self.data, default=_default))
        if isinstance(target, type) and issubclass(target, JSONModel):
            return target.from_dict(payload)
        if target is object or payload is None:
            return payload
        if not isinstance(payload, target):
            raise TypeError(f"cannot convert event data to {target.__name__}")
        return payload

    def validate(self) -> None:
        """Raise ``ValueError`` unless time, type, id and source are set."""
        if self.time is None:
            raise ValueError("time must be specified")
        if not self.type:
            raise ValueError("type must be specified")
        if not self.id:
            raise ValueError("id must be specified")
        if not self.source:
            raise ValueError("source must be specified")


@dataclass
class Events(JSONModel):
    """A page of events."""

    events: list[KeptnContextExtendedCE | None] = _list("events", KeptnContextExtendedCE)
    next_page_key: str = _str("nextPageKey")
    page_size: float = _float("pageSize")
    total_count: float = _float("totalCount")