"""OpenTSDB back-end for vFlow monitoring."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from vflow.monitor.store import (
    Flow,
    HTTPClient,
    Monitor,
    MonitorError,
    Sys,
    _rate,
    get_flow,
)

_NETFLOW_RATES = (
    ("ipfix", "udp.rate", "udp_count"),
    ("sflow", "udp.rate", "udp_count"),
    ("ipfix", "decode.rate", "decoded_count"),
    ("sflow", "decode.rate", "decoded_count"),
    ("ipfix", "mq.error.rate", "mq_error_count"),
    ("sflow", "mq.error.rate", "mq_error_count"),
)

_SYSTEM = (
    ("mem.heap.alloc", "mem_heap_alloc"),
    ("mem.alloc", "mem_alloc"),
    ("mcache.inuse", "mcache_inuse"),
    ("mem.total.alloc", "mem_total_alloc"),
    ("mem.heap.sys", "mem_heap_sys"),
    ("num.goroutine", "num_goroutine"),
)


@dataclass
class TSDBDataPoint:
    """A single OpenTSDB data point."""

    metric: str
    timestamp: int
    value: int
    host: str
    type: str = ""

    def to_dict(self) -> dict:
        """Return the JSON document OpenTSDB expects."""
        return {
            "metric": self.metric,
            "timestamp": self.timestamp,
            "value": self.value,
            "Tags": {"host": self.host, "type": self.type},
        }


def netflow_points(
    flow: Flow, last_flow: Flow, hostname: str, timestamp: int
) -> list[TSDBDataPoint]:
    """Data points for IPFIX and sFlow rates and worker counts.

    Raises MonitorError for a zero interval or a negative rate.
    """
    delta = flow.timestamp - last_flow.timestamp
    points = [
        TSDBDataPoint(
            metric=metric,
            timestamp=timestamp,
            value=_rate(
                getattr(getattr(flow, kind), attr),
                getattr(getattr(last_flow, kind), attr),
                delta,
            ),
            host=hostname,
            type=kind,
        )
        for kind, metric, attr in _NETFLOW_RATES
    ]
    points.extend(
        TSDBDataPoint("workers", timestamp, getattr(flow, kind).workers, hostname, kind)
        for kind in ("ipfix", "sflow")
    )
    return points


def system_points(sys: Sys, hostname: str, timestamp: int) -> list[TSDBDataPoint]:
    """Data points for the runtime statistics."""
    return [
        TSDBDataPoint(metric, timestamp, getattr(sys, attr), hostname)
        for metric, attr in _SYSTEM
    ]


@dataclass
class TSDB(Monitor):
    """Writes vFlow statistics to OpenTSDB."""

    api: str
    vhost: str
    state_dir: Optional[str] = None

    def netflow(self, hostname: str) -> None:
        """Store the flow rates and worker counts of ``hostname``."""
        flow, last_flow = get_flow(self.vhost, hostname, self.state_dir)
        self.put(netflow_points(flow, last_flow, hostname, int(time.time())))

    def system(self, hostname: str) -> None:
        """Store the runtime statistics of ``hostname``."""
        sys = Sys.from_dict(HTTPClient().get(self.vhost + "/sys"))
        self.put(system_points(sys, hostname, int(time.time())))

    def put(self, points: Iterable[TSDBDataPoint]) -> None:
        """Send data points; raises MonitorError if any were rejected."""
        payload = json.dumps([point.to_dict() for point in points])
        body = HTTPClient().post(f"{self.api}/api/put", "application/json", payload)
        try:
            reply = json.loads(body) if body else {}
        except ValueError:
            return
        if isinstance(reply, dict):
            try:
                failed = int(reply.get("failed", 0))
            except (TypeError, ValueError):
                return
            if failed > 0:
                raise MonitorError("TSDB error")