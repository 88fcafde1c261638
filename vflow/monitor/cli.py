"""Command line entry point that pushes vFlow statistics to a store."""

from __future__ import annotations

import argparse
import logging
import socket
from typing import Optional, Sequence

from vflow.monitor.influxdb import InfluxDB
from vflow.monitor.store import Monitor, MonitorError
from vflow.monitor.tsdb import TSDB

log = logging.getLogger("vflow.monitor")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse the command line options."""
    parser = argparse.ArgumentParser(
        prog="vflow-monitor",
        description="Ingest vFlow statistics into a time series database.",
    )
    parser.add_argument(
        "-db-type", "--db-type", dest="db_type", default="influxdb",
        help="database type name to ingest",
    )
    parser.add_argument(
        "-vflow-host", "--vflow-host", dest="vflow_host",
        default="http://localhost:8081", help="vflow host address and port",
    )
    parser.add_argument(
        "-influxdb-api-addr", "--influxdb-api-addr", dest="influxdb_api_addr",
        default="http://localhost:8086", help="influxdb api address",
    )
    parser.add_argument(
        "-influxdb-db-name", "--influxdb-db-name", dest="influxdb_db_name",
        default="vflow", help="influxdb database name",
    )
    parser.add_argument(
        "-tsdb-api-addr", "--tsdb-api-addr", dest="tsdb_api_addr",
        default="http://localhost:4242", help="tsdb api address",
    )
    parser.add_argument(
        "-hostname", "--hostname", dest="hostname", default="na",
        help="overwrite hostname",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Push flow and system statistics once; return the exit status."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    opts = parse_args(argv)

    monitors: dict[str, Monitor] = {
        "influxdb": InfluxDB(
            api=opts.influxdb_api_addr,
            db=opts.influxdb_db_name,
            vhost=opts.vflow_host,
        ),
        "tsdb": TSDB(api=opts.tsdb_api_addr, vhost=opts.vflow_host),
    }

    monitor = monitors.get(opts.db_type)
    if monitor is None:
        log.critical("the storage: %s is not available", opts.db_type)
        return 1

    hostname = opts.hostname
    if hostname == "na":
        try:
            hostname = socket.gethostname()
        except OSError:
            log.warning("unknown hostname")
            hostname = ""

    for action in (monitor.netflow, monitor.system):
        try:
            action(hostname)
        except (MonitorError, OSError, ValueError) as exc:
            log.error("%s", exc)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())