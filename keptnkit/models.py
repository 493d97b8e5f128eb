"""Data models exchanged with the Keptn API, with JSON (de)serialisation."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import Any

_ZERO_TIME_TEXT = "0001-01-01T00:00:00Z"
_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)


def _format_time(value: datetime | None) -> str:
    """Render a timestamp as RFC 3339; ``None`` stands for the zero time."""
    if value is None:
        return _ZERO_TIME_TEXT
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if not offset:
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_time(text: str) -> datetime | None:
    """Parse an RFC 3339 timestamp; the zero time becomes ``None``."""
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    micro = int(fraction.ljust(6, "0")[:6]) if fraction else 0
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    if (year, month, day, hour, minute, second, micro) == (1, 1, 1, 0, 0, 0, 0) and tz.utcoffset(None) == timedelta(0):
        return None
    return datetime(year, month, day, hour, minute, second, micro, tzinfo=tz)


def _meta(name: str, omitempty: bool, **extra: Any) -> dict[str, Any]:
    return {"json": name, "omitempty": omitempty, **extra}


def _str(name: str, *, omitempty: bool = True) -> Any:
    return field(default="", metadata=_meta(name, omitempty, type=str))


def _opt_str(name: str, *, omitempty: bool = False) -> Any:
    return field(default=None, metadata=_meta(name, omitempty, type=str))


def _int(name: str, *, omitempty: bool = True) -> Any:
    return field(default=0, metadata=_meta(name, omitempty, type=int))


def _float(name: str, *, omitempty: bool = True) -> Any:
    return field(default=0.0, metadata=_meta(name, omitempty, type=float))


def _time(name: str) -> Any:
    return field(default=None, metadata=_meta(name, False, time=True))


def _any(name: str, *, omitempty: bool = False) -> Any:
    return field(default=None, metadata=_meta(name, omitempty))


def _model(name: str, model: type, *, omitempty: bool = False, required: bool = False) -> Any:
    metadata = _meta(name, omitempty, model=model)
    if required:
        return field(default_factory=model, metadata=metadata)
    return field(default=None, metadata=metadata)


def _list(name: str, model: type | None = None, *, omitempty: bool = False) -> Any:
    return field(default_factory=list, metadata=_meta(name, omitempty, model=model, container="list"))


def _map(name: str, model: type | None = None, *, omitempty: bool = False) -> Any:
    return field(default_factory=dict, metadata=_meta(name, omitempty, model=model, container="dict"))


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def _encode(value: Any) -> Any:
    if isinstance(value, JSONModel):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    if isinstance(value, datetime):
        return _format_time(value)
    return value


def _coerce(value: Any, expected: type, key: str) -> Any:
    if expected is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif expected is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(value, expected):
        return value
    raise ValueError(f"field {key!r}: expected {expected.__name__}, got {type(value).__name__}")


def _decode_item(value: Any, model: type | None, key: str) -> Any:
    if model is None or value is None:
        return value
    if not isinstance(value, Mapping):
        raise ValueError(f"field {key!r}: expected an object, got {type(value).__name__}")
    return model.from_dict(value)


def _decode(value: Any, meta: Mapping[str, Any], key: str) -> Any:
    if meta.get("time"):
        if not isinstance(value, str):
            raise ValueError(f"field {key!r}: expected a timestamp string")
        return _parse_time(value)
    container = meta.get("container")
    model = meta.get("model")
    if container == "list":
        if not isinstance(value, list):
            raise ValueError(f"field {key!r}: expected an array")
        return [_decode_item(item, model, key) for item in value]
    if container == "dict":
        if not isinstance(value, Mapping):
            raise ValueError(f"field {key!r}: expected an object")
        return {name: _decode_item(item, model, key) for name, item in value.items()}
    if model is not None:
        return _decode_item(value, model, key)
    expected = meta.get("type")
    if expected is not None:
        return _coerce(value, expected, key)
    return value


class JSONModel:
    """Base for dataclasses whose fields map onto JSON keys."""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, leaving out empty optional keys."""
        result: dict[str, Any] = {}
        for spec in fields(self):  # type: ignore[arg-type]
            meta = spec.metadata
            if "json" not in meta:
                continue
            value = getattr(self, spec.name)
            if meta.get("time"):
                result[meta["json"]] = _format_time(value)
                continue
            if meta.get("omitempty") and _is_empty(value):
                continue
            result[meta["json"]] = _encode(value)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Any:
        """Build an instance from a decoded JSON object."""
        if not isinstance(data, Mapping):
            raise ValueError(f"cannot decode {type(data).__name__} into {cls.__name__}")
        kwargs: dict[str, Any] = {}
        for spec in fields(cls):  # type: ignore[arg-type]
            meta = spec.metadata
            key = meta.get("json")
            if key is None or not spec.init:
                continue
            value = data.get(key)
            if value is not None:
                kwargs[spec.name] = _decode(value, meta, key)
        return cls(**kwargs)

    def to_json(self) -> str:
        """Serialise to a JSON document."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str | bytes) -> Any:
        """Parse a JSON document into an instance."""
        return cls.from_dict(json.loads(text))


@dataclass
class Approval(JSONModel):
    event_id: str = _str("eventId")
    image: str = _str("image")
    keptn_context: str = _str("keptnContext")
    tag: str = _str("tag")
    time: str = _str("time")


@dataclass
class CreateProject(JSONModel):
    git_remote_url: str = _str("gitRemoteURL")
    git_token: str = _str("gitToken")
    git_user: str = _str("gitUser")
    name: str | None = _opt_str("name")
    shipyard: str | None = _opt_str("shipyard")


@dataclass
class CreateService(JSONModel):
    service_name: str | None = _opt_str("serviceName")


@dataclass
class DeleteProjectResponse(JSONModel):
    message: str = _str("message")


@dataclass
class DeleteServiceResponse(JSONModel):
    message: str = _str("message")


@dataclass
class Error(JSONModel):
    """Error body returned by the API."""

    code: int = _int("code")
    message: str | None = _opt_str("message")


@dataclass
class Evaluation(JSONModel):
    start: str = _str("start")
    labels: dict[str, str] = _map("labels", omitempty=True)
    timeframe: str = _str("timeframe")
    end: str = _str("end")


@dataclass
class EventContext(JSONModel):
    keptn_context: str | None = _opt_str("keptnContext")


@dataclass
class EventContextInfo(JSONModel):
    event_id: str = _str("eventId")
    keptn_context: str = _str("keptnContext")
    time: str = _str("time")


@dataclass
class LogEntry(JSONModel):
    integration_id: str = _str("integrationid", omitempty=False)
    message: str = _str("message", omitempty=False)
    time: datetime | None = _time("time")
    keptn_context: str = _str("shkeptncontext", omitempty=False)
    task: str = _str("task", omitempty=False)
    triggered_id: str = _str("triggeredid", omitempty=False)


@dataclass
class LogFilter:
    """Criteria for selecting log entries."""

    integration_id: str = ""
    from_time: str = ""
    before_time: str = ""


@dataclass
class GetLogsParams(LogFilter):
    """Log filter plus paging parameters."""

    page_size: int = 0
    next_page_key: int = 0


@dataclass
class GetLogsResponse(JSONModel):
    next_page_key: int = _int("nextPageKey")
    page_size: int = _int("pageSize")
    total_count: int = _int("totalCount")
    logs: list[LogEntry] = _list("logs", LogEntry)


@dataclass
class CreateLogsRequest(JSONModel):
    logs: list[LogEntry] = _list("logs", LogEntry)


@dataclass
class Metadata(JSONModel):
    bridge_version: str = _str("bridgeversion")
    keptn_label: str = _str("keptnlabel")
    keptn_services: Any = _any("keptnservices", omitempty=True)
    keptn_version: str = _str("keptnversion")
    namespace: str = _str("namespace")


@dataclass
class Version(JSONModel):
    branch: str = _str("branch")
    upstream_url: str = _str("upstreamURL")
    version: str = _str("version")


@dataclass
class Resource(JSONModel):
    metadata: Version | None = _model("metadata", Version, omitempty=True)
    resource_content: str = _str("resourceContent")
    resource_uri: str | None = _opt_str("resourceURI")


@dataclass
class Resources(JSONModel):
    next_page_key: str = _str("nextPageKey")
    page_size: float = _float("pageSize")
    resources: list[Resource | None] = _list("resources", Resource)
    total_count: float = _float("totalCount")


@dataclass
class Service(JSONModel):
    creation_date: str = _str("creationDate")
    deployed_image: str = _str("deployedImage")
    last_event_types: dict[str, EventContextInfo] = _map("lastEventTypes", EventContextInfo, omitempty=True)
    open_approvals: list[Approval | None] = _list("openApprovals", Approval)
    service_name: str = _str("serviceName")


@dataclass
class Services(JSONModel):
    next_page_key: str = _str("nextPageKey")
    page_size: float = _float("pageSize")
    services: list[Service | None] = _list("services", Service)
    total_count: float = _float("totalCount")


@dataclass
class Stage(JSONModel):
    services: list[Service | None] = _list("services", Service)
    stage_name: str = _str("stageName")


@dataclass
class Stages(JSONModel):
    next_page_key: str = _str("nextPageKey")
    page_size: float = _float("pageSize")
    stages: list[Stage | None] = _list("stages", Stage)
    total_count: float = _float("totalCount")


@dataclass
class Project(JSONModel):
    creation_date: str = _str("creationDate")
    git_remote_uri: str = _str("gitRemoteURI")
    git_token: str = _str("gitToken")
    git_user: str = _str("gitUser")
    project_name: str = _str("projectName")
    shipyard_version: str = _str("shipyardVersion")
    stages: list[Stage | None] = _list("stages", Stage)


@dataclass
class Projects(JSONModel):
    next_page_key: str = _str("nextPageKey")
    page_size: float = _float("pageSize")
    projects: list[Project | None] = _list("projects", Project)
    total_count: float = _float("totalCount")


@dataclass
class RegisterIntegrationResponse(JSONModel):
    id: str = _str("id", omitempty=False)


@dataclass
class SecretMetadata(JSONModel):
    name: str | None = _opt_str("name")
    scope: str | None = _opt_str("scope", omitempty=True)


@dataclass
class Secret(SecretMetadata):
    data: dict[str, str] = _map("data")


@dataclass
class GetSecretsResponse(JSONModel):
    secrets: list[SecretMetadata] = _list("secrets", SecretMetadata)


@dataclass
class Timeframe(JSONModel):
    start: str = _str("from")
    timeframe: str = _str("timeframe")
    end: str = _str("to")