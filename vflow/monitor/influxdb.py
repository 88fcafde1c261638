"""InfluxDB back-end for vFlow monitoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vflow.monitor.store import (
    Flow,
    HTTPClient,
    Monitor,
    MonitorError,
    Sys,
    _rate,
    get_flow,
)

_KINDS = (
    ("ipfix", "ipfix"),
    ("sflow", "sflow"),
    ("netflowv5", "netflow_v5"),
    ("netflowv9", "netflow_v9"),
)

_RATES = (
    ("udp.rate", "udp_count"),
    ("decode.rate", "decoded_count"),
    ("mq.error.rate", "mq_error_count"),
)

_GAUGES = (
    ("workers", "workers"),
    ("udp.queue", "udp_queue"),
    ("mq.queue", "message_queue"),
)

_SYSTEM = (
    ("mem.heap.alloc", "mem_heap_alloc"),
    ("mem.alloc", "mem_alloc"),
    ("mcache.inuse", "mcache_inuse"),
    ("mem.total.alloc", "mem_total_alloc"),
    ("mem.heap.sys", "mem_heap_sys"),
    ("num.goroutine", "num_goroutine"),
)


def netflow_lines(flow: Flow, last_flow: Flow, hostname: str) -> str:
    """Render flow statistics in InfluxDB line protocol.

    Raises MonitorError for a zero interval or a negative rate.
    """
    delta = flow.timestamp - last_flow.timestamp
    lines = []
    for metric, attr in _RATES:
        for kind, section in _KINDS:
            value = _rate(
                getattr(getattr(flow, section), attr),
                getattr(getattr(last_flow, section), attr),
                delta,
            )
            lines.append(f"{metric},type={kind},host={hostname} value={value}\n")
    for metric, attr in _GAUGES:
        for kind, section in _KINDS:
            value = getattr(getattr(flow, section), attr)
            lines.append(f"{metric},type={kind},host={hostname} value={value}\n")
    lines.append(
        f"udp.mirror.queue,type=ipfix,host={hostname} "
        f"value={flow.ipfix.udp_mirror_queue}\n"
    )
    return "".join(lines)


def system_lines(sys: Sys, hostname: str) -> str:
    """Render runtime statistics in InfluxDB line protocol."""
    return "".join(
        f"{metric},host={hostname} value={getattr(sys, attr)}\n"
        for metric, attr in _SYSTEM
    )


@dataclass
class InfluxDB(Monitor):
    """Writes vFlow statistics to an InfluxDB database."""

    api: str
    db: str
    vhost: str
    state_dir: Optional[str] = None

    def _write(self, client: HTTPClient, query: str) -> None:
        body = client.post(f"{self.api}/write?db={self.db}", "text/plain", query)
        if body:
            raise MonitorError("influxdb error: " + body.decode(errors="replace"))

    def netflow(self, hostname: str) -> None:
        """Store the flow rates and queue sizes of ``hostname``."""
        flow, last_flow = get_flow(self.vhost, hostname, self.state_dir)
        self._write(HTTPClient(), netflow_lines(flow, last_flow, hostname))

    def system(self, hostname: str) -> None:
        """Store the runtime statistics of ``hostname``."""
        client = HTTPClient()
        sys = Sys.from_dict(client.get(self.vhost + "/sys"))
        self._write(client, system_lines(sys, hostname))