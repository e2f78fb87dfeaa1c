"""Configuration resources, LLM usage records and structured log entries."""

from __future__ import annotations

import dataclasses
import enum
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

_log = logging.getLogger(__name__)

GROUP = "foyle.io"
VERSION = "v1alpha1"
EXPERIMENT_API_VERSION = f"{GROUP}/{VERSION}"
EXPERIMENT_KIND = "Experiment"

# Field holding the trace ID in agent logs.
TRACE_ID_FIELD = "traceId"
# Field holding the trace ID in notebook runner logs.
RUNME_ID_FIELD = "_id"

REQUEST_FIELD = "request"
RESPONSE_FIELD = "response"

T = TypeVar("T")


class ModelProvider(str, enum.Enum):
    """Supported LLM vendors."""

    REPLICATE = "replicate"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    DEFAULT = "openai"
    UNKNOWN = "unknown"


class ProtoModelProvider(enum.IntEnum):
    """Model provider as carried in wire messages."""

    MODEL_PROVIDER_UNKNOWN = 0
    OPEN_AI = 1
    ANTHROPIC = 2


def model_provider_proto_to_api(provider: ProtoModelProvider | int) -> ModelProvider:
    """Map a wire-level provider to the configuration provider."""
    if provider == ProtoModelProvider.OPEN_AI:
        return ModelProvider.OPENAI
    if provider == ProtoModelProvider.ANTHROPIC:
        return ModelProvider.ANTHROPIC
    return ModelProvider.UNKNOWN


@dataclass
class RAGConfig:
    """Retrieval-augmented generation settings."""

    enabled: bool = False
    max_results: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"enabled": self.enabled, "maxResults": self.max_results}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RAGConfig:
        return cls(
            enabled=bool(data.get("enabled", False)),
            max_results=int(data.get("maxResults", 0)),
        )


@dataclass
class AgentConfig:
    """Settings for the completion agent."""

    model: str = ""
    model_provider: ModelProvider = ModelProvider.DEFAULT
    rag: RAGConfig | None = None
    eval_mode: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "model": self.model,
            "modelProvider": self.model_provider.value,
        }
        if self.rag is not None:
            out["rag"] = self.rag.to_dict()
        out["evalMode"] = self.eval_mode
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AgentConfig:
        rag = data.get("rag")
        return cls(
            model=data.get("model", ""),
            model_provider=ModelProvider(data.get("modelProvider", ModelProvider.DEFAULT.value)),
            rag=RAGConfig.from_dict(rag) if rag is not None else None,
            eval_mode=bool(data.get("evalMode", False)),
        )


@dataclass
class Metadata:
    """Resource metadata."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.namespace:
            out["namespace"] = self.namespace
        out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.resource_version:
            out["resourceVersion"] = self.resource_version
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metadata:
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            resource_version=data.get("resourceVersion", ""),
        )


@dataclass
class ExperimentSpec:
    """What an experiment evaluates and where it stores results."""

    agent_address: str = ""
    eval_dir: str = ""
    output_db: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "agentAddress": self.agent_address,
            "evalDir": self.eval_dir,
            "outputDB": self.output_db,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExperimentSpec:
        return cls(
            agent_address=data.get("agentAddress", ""),
            eval_dir=data.get("evalDir", ""),
            output_db=data.get("outputDB", ""),
        )


@dataclass
class Experiment:
    """An evaluation experiment resource."""

    metadata: Metadata = field(default_factory=Metadata)
    spec: ExperimentSpec = field(default_factory=ExperimentSpec)

    api_version = EXPERIMENT_API_VERSION
    kind = EXPERIMENT_KIND

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": self.metadata.to_dict(), "spec": self.spec.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Experiment:
        return cls(
            metadata=Metadata.from_dict(data.get("metadata") or {}),
            spec=ExperimentSpec.from_dict(data.get("spec") or {}),
        )


@dataclass
class LLMUsage:
    """Model-independent record of LLM token usage."""

    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""
    provider: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "model": self.model,
            "provider": self.provider,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LLMUsage:
        return cls(
            input_tokens=int(data.get("inputTokens", 0)),
            output_tokens=int(data.get("outputTokens", 0)),
            model=str(data.get("model", "")),
            provider=str(data.get("provider", "")),
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _dump(value: Any) -> bytes:
    return json.dumps(value, sort_keys=True, separators=(",", ":")).encode()


class LogEntry(dict):
    """A structured log record decoded from JSON.

    Field types depend on context, so typed accessors return None when a
    field is missing or holds a value of another type.
    """

    def get_bool(self, field: str) -> bool | None:
        value = self.get(field)
        return value if isinstance(value, bool) else None

    def get_string(self, field: str) -> str | None:
        value = self.get(field)
        return value if isinstance(value, str) else None

    def get_float(self, field: str) -> float | None:
        value = self.get(field)
        return float(value) if _is_number(value) else None

    def get_struct(self, field: str, factory: Callable[[Mapping[str, Any]], T]) -> T | None:
        """Build an object from a nested mapping field, or None if that fails."""
        value = self.get(field)
        if not isinstance(value, dict):
            return None
        try:
            return factory(value)
        except (TypeError, ValueError, KeyError) as err:
            _log.error("Failed to decode field %s: %s", field, err)
            return None

    def _first_object(self, fields: tuple[str, ...]) -> bytes | None:
        for name in fields:
            value = self.get(name)
            if isinstance(value, dict):
                return _dump(value)
        return None

    def request(self) -> bytes | None:
        """JSON of the request, logged as "request" or "req"."""
        return self._first_object(("request", "req"))

    def response(self) -> bytes | None:
        """JSON of the response, logged as "response" or "resp"."""
        return self._first_object(("response", "resp"))

    def eval_mode(self) -> bool | None:
        """The evalMode flag, or None when absent."""
        return self.get_bool("evalMode")

    def function(self) -> str:
        return self.get_string("function") or ""

    def message(self) -> str:
        return self.get_string("message") or ""

    def trace_id(self) -> str:
        for name in (TRACE_ID_FIELD, RUNME_ID_FIELD):
            value = self.get(name)
            if isinstance(value, str):
                return value
        return ""

    def time(self) -> datetime | None:
        """The entry's timestamp (seconds since the epoch) in UTC."""
        value = self.get("time")
        if not _is_number(value):
            return None
        seconds = int(value)
        micros = int((value - seconds) * 1e6)
        return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(microseconds=micros)


def _to_object(value: Any) -> dict[str, Any]:
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    decoded = json.loads(json.dumps(value))
    if not isinstance(decoded, dict):
        raise TypeError(f"expected an object, got {type(decoded).__name__}")
    return decoded


def set_request(entry: LogEntry, req: Any) -> None:
    """Store req in the entry's request field as plain JSON data."""
    entry[REQUEST_FIELD] = _to_object(req)


def set_response(entry: LogEntry, resp: Any) -> None:
    """Store resp in the entry's response field as plain JSON data."""
    entry[RESPONSE_FIELD] = _to_object(resp)