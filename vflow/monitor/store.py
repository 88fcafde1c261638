"""Ingestion of vFlow monitoring time series into storage back-ends."""

from __future__ import annotations

import contextlib
import json
import tempfile
import time
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional


class MonitorError(RuntimeError):
    """Raised when metrics cannot be fetched, computed or stored."""


def _field(data: Mapping[str, Any], key: str) -> Any:
    """Look up ``key`` exactly, then case-insensitively; missing means 0."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for name, value in data.items():
        if isinstance(name, str) and name.lower() == lowered:
            return value
    return 0


def _as_int(data: Mapping[str, Any], key: str) -> int:
    value = _field(data, key)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MonitorError(f"invalid value for {key}: {value!r}") from exc


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise MonitorError(f"{what} must be a JSON object")
    return data


def _rate(current: int, previous: int, delta: int) -> int:
    """Per-second rate of a counter, truncated toward zero.

    Raises MonitorError for a zero interval or a negative rate.
    """
    if delta == 0:
        raise MonitorError("zero interval between flow samples")
    diff = current - previous
    quotient = abs(diff) // abs(delta)
    value = quotient if (diff >= 0) == (delta > 0) else -quotient
    if value < 0:
        raise MonitorError(f"negative rate ({value})")
    return value


_STATS_KEYS = (
    ("UDPQueue", "udp_queue"),
    ("UDPMirrorQueue", "udp_mirror_queue"),
    ("MessageQueue", "message_queue"),
    ("UDPCount", "udp_count"),
    ("DecodedCount", "decoded_count"),
    ("MQErrorCount", "mq_error_count"),
    ("Workers", "workers"),
)

_FLOW_SECTIONS = (
    ("IPFIX", "ipfix"),
    ("SFlow", "sflow"),
    ("NetflowV5", "netflow_v5"),
    ("NetflowV9", "netflow_v9"),
)


@dataclass
class FlowStats:
    """Counters of one flow protocol; only IPFIX has a mirror queue."""

    udp_queue: int = 0
    udp_mirror_queue: int = 0
    message_queue: int = 0
    udp_count: int = 0
    decoded_count: int = 0
    mq_error_count: int = 0
    workers: int = 0

    @classmethod
    def _from_dict(cls, data: Any) -> "FlowStats":
        data = _require_mapping(data if data != 0 else {}, "flow statistics")
        return cls(**{attr: _as_int(data, key) for key, attr in _STATS_KEYS})

    def _to_dict(self, with_mirror: bool) -> dict[str, int]:
        return {
            key: getattr(self, attr)
            for key, attr in _STATS_KEYS
            if with_mirror or attr != "udp_mirror_queue"
        }


@dataclass
class Flow:
    """Flow metrics of a vFlow instance at one point in time."""

    start_time: int = 0
    timestamp: int = 0
    ipfix: FlowStats = field(default_factory=FlowStats)
    sflow: FlowStats = field(default_factory=FlowStats)
    netflow_v5: FlowStats = field(default_factory=FlowStats)
    netflow_v9: FlowStats = field(default_factory=FlowStats)

    @classmethod
    def from_dict(cls, data: Any) -> "Flow":
        """Build a flow sample from its decoded JSON document."""
        data = _require_mapping(data, "flow metrics")
        sections = {
            attr: FlowStats._from_dict(_field(data, key))
            for key, attr in _FLOW_SECTIONS
        }
        return cls(
            start_time=_as_int(data, "StartTime"),
            timestamp=_as_int(data, "Timestamp"),
            **sections,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON document for this sample."""
        document: dict[str, Any] = {
            "StartTime": self.start_time,
            "Timestamp": self.timestamp,
        }
        for key, attr in _FLOW_SECTIONS:
            document[key] = getattr(self, attr)._to_dict(attr == "ipfix")
        return document


_SYS_KEYS = (
    ("MemHeapAlloc", "mem_heap_alloc"),
    ("MemAlloc", "mem_alloc"),
    ("MCacheInuse", "mcache_inuse"),
    ("GCNext", "gc_next"),
    ("MemTotalAlloc", "mem_total_alloc"),
    ("GCSys", "gc_sys"),
    ("MemHeapSys", "mem_heap_sys"),
    ("NumGoroutine", "num_goroutine"),
    ("NumLogicalCPU", "num_logical_cpu"),
    ("MemHeapReleased", "mem_heap_released"),
)


@dataclass
class Sys:
    """Runtime statistics of a vFlow instance."""

    mem_heap_alloc: int = 0
    mem_alloc: int = 0
    mcache_inuse: int = 0
    gc_next: int = 0
    mem_total_alloc: int = 0
    gc_sys: int = 0
    mem_heap_sys: int = 0
    num_goroutine: int = 0
    num_logical_cpu: int = 0
    mem_heap_released: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Sys":
        """Build the statistics from their decoded JSON document."""
        data = _require_mapping(data, "system statistics")
        return cls(**{attr: _as_int(data, key) for key, attr in _SYS_KEYS})


assert {f.name for f in fields(Sys)} == {attr for _, attr in _SYS_KEYS}


@dataclass
class HTTPClient:
    """Small HTTP client for the vFlow API and the storage back-ends."""

    timeout: Optional[float] = None

    def _open(self, request: urllib.request.Request) -> bytes:
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as exc:
            with exc:
                return exc.read()
        except (urllib.error.URLError, OSError) as exc:
            raise MonitorError(str(exc)) from exc

    def get(self, url: str) -> Any:
        """Fetch ``url`` and return its body decoded as JSON."""
        body = self._open(urllib.request.Request(url, method="GET"))
        try:
            return json.loads(body)
        except ValueError as exc:
            raise MonitorError(f"invalid JSON from {url}: {exc}") from exc

    def post(self, url: str, content_type: str, body: str | bytes) -> bytes:
        """Post ``body`` to ``url`` and return the response body."""
        data = body.encode() if isinstance(body, str) else bytes(body)
        request = urllib.request.Request(
            url, data=data, headers={"Content-Type": content_type}, method="POST"
        )
        return self._open(request)


class Monitor(ABC):
    """A back-end that stores flow and system statistics."""

    @abstractmethod
    def netflow(self, hostname: str) -> None:
        """Store flow statistics for ``hostname``."""

    @abstractmethod
    def system(self, hostname: str) -> None:
        """Store system statistics for ``hostname``."""


def _save(path: Path, flow: Flow) -> None:
    with contextlib.suppress(OSError):
        path.write_text(json.dumps(flow.to_dict(), separators=(",", ":")))


def get_flow(vhost: str, host: str, state_dir=None) -> tuple[Flow, Flow]:
    """Fetch the current flow sample and return it with the previous one.

    The current sample is saved under ``state_dir`` (the system temporary
    directory by default). Raises MonitorError when there is no previous
    sample yet, or when vFlow has restarted since the previous one.
    """
    path = Path(state_dir or tempfile.gettempdir()) / f"vflow.mon.lastflow.{host}"

    flow = Flow.from_dict(HTTPClient().get(vhost + "/flow"))
    flow.timestamp = int(time.time())

    try:
        raw = path.read_bytes()
    except OSError as exc:
        _save(path, flow)
        raise MonitorError(f"no previous flow sample: {exc}") from exc

    try:
        last_flow = Flow.from_dict(json.loads(raw))
    except ValueError as exc:
        raise MonitorError(f"invalid previous flow sample: {exc}") from exc

    _save(path, flow)

    if flow.start_time != last_flow.start_time:
        raise MonitorError("vflow has been restarted since the previous sample")

    return flow, last_flow