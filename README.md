# vflow

Building blocks for working with network flow data:

- `vflow.reader` – a big-endian byte reader (`Reader`) that tracks how much
  it has consumed and raises `ReaderError` on short input.
- `vflow.netflow5` – a NetFlow version 5 decoder (`Decoder`, `Message`,
  `PacketHeader`, `FlowRecord`, `DecodeError`) and a JSON encoder (`to_json`).
- `vflow.packet` – decoding of sampled packet headers: Ethernet (with 802.1Q
  VLAN tags), IPv4, IPv6, TCP, UDP and ICMP, driven by `Packet.decode`.
- `vflow.mirror` – IPv4, IPv6 and UDP header templates for building packets
  to replay to another collector, and a raw IP socket (`RawConn`).
- `vflow.monitor` – reading a running collector's statistics over HTTP and
  writing them to InfluxDB or OpenTSDB, with the `vflow-monitor` command.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Reading binary data

```python
from vflow.reader import Reader, ReaderError

r = Reader(bytes([0x05, 0x11, 0x01, 0x16]))
r.uint16()        # 1297
r.read_count()    # 2
len(r)            # 2 bytes left
r.peek_uint16()   # 278, nothing consumed
try:
    r.uint32()
except ReaderError:
    ...
```

## Decoding NetFlow v5

```python
from vflow.netflow5.decoder import Decoder, DecodeError
from vflow.netflow5.marshal import to_json

try:
    message = Decoder("192.0.2.1", payload).decode()
except DecodeError as exc:
    print("bad packet:", exc, exc.partial)
else:
    print(to_json(message).decode())
```

The header must carry version 5 and a flow count between 1 and 30; each
flow record is 48 bytes. A payload too short for the 24-byte header raises
`ReaderError`; an invalid header, or fewer bytes than the announced flows
need, raises `DecodeError`. In the latter case `partial` holds the message
with its decoded header. `to_json` returns compact JSON bytes with the keys
`AgentID`, `Header` and `Flows`; flow addresses are written as dotted IPv4
strings.

## Decoding packet headers

```python
from vflow.packet.packet import HeaderProtocol, Packet

packet = Packet().decode(frame, HeaderProtocol.ETHERNET)
packet.l2.src_mac, packet.l2.vlan
packet.l3.src, packet.l3.dst       # IPv4Header or IPv6Header
packet.l4                          # TCPHeader, UDPHeader or ICMP
packet.data                        # bytes after the transport header
```

`HeaderProtocol.IPV4` and `HeaderProtocol.IPV6` start decoding at the IP
header. Short headers, unknown EtherTypes, unknown header protocols and
unknown transport protocols raise `ValueError`; the layers decoded before
the failure stay set on the packet. The individual decoders
(`decode_ethernet`, `decode_ieee802`, `decode_ipv4_header`,
`decode_ipv6_header`, `decode_next_layer`, `decode_tcp`, `decode_udp`,
`decode_icmp`) can also be called directly.

## Building mirrored packets

```python
from vflow.mirror.ipv4 import ipv4_header_template
from vflow.mirror.udp import UDPHeader
from vflow.mirror.rawconn import RawConn

ip = ipv4_header_template(17)
header = ip.marshal()
ip.set_addrs(header, "192.0.2.10", "198.51.100.1")
udp = UDPHeader(src_port=4739, dst_port=4739, length=len(payload))
ip.set_len(header, 8 + len(payload))

with RawConn("198.51.100.1") as conn:
    conn.send(bytes(header) + bytes(udp.marshal()) + payload)
```

`ipv6_header_template` and `IPv6Header` do the same for IPv6. The headers
carry no checksum: the IPv4 checksum and the UDP checksum are left as set
(zero by default). `RawConn` opens a raw `IPPROTO_RAW` socket and so needs
the privileges the operating system requires for that; `address_family`
tells which family an address belongs to, treating IPv4-mapped IPv6
addresses as IPv4.

## Monitoring a collector

The `vflow-monitor` command fetches the collector's `/flow` and `/sys`
statistics once and stores rates and gauges in a time-series database:

```
vflow-monitor --db-type influxdb --vflow-host http://localhost:8081 \
    --influxdb-api-addr http://localhost:8086 --influxdb-db-name vflow
```

```
vflow-monitor --db-type tsdb --tsdb-api-addr http://localhost:4242
```

Options (each also accepted with a single dash, e.g. `-db-type`):

| option                | default                 |
|-----------------------|-------------------------|
| `--db-type`           | `influxdb`              |
| `--vflow-host`        | `http://localhost:8081` |
| `--influxdb-api-addr` | `http://localhost:8086` |
| `--influxdb-db-name`  | `vflow`                 |
| `--tsdb-api-addr`     | `http://localhost:4242` |
| `--hostname`          | the machine's hostname  |

An unknown `--db-type` exits with status 1. Errors while storing flow or
system statistics are logged and the command still exits with status 0.

Rates are computed against the previous sample, which `get_flow` keeps in a
file named `vflow.mon.lastflow.<host>` in the system temporary directory.
The first run only records that sample and reports an error for the flow
statistics; a collector restart between two samples is reported as an
error too. A negative rate or a zero interval raises `MonitorError`.

The same work is available from Python: `InfluxDB(api, db, vhost)` and
`TSDB(api, vhost)` implement `Monitor.netflow` and `Monitor.system`, and
`netflow_lines`, `system_lines`, `netflow_points` and `system_points`
render the data without any network access.

## What it does not do

The package does not listen for flow traffic itself: there is no UDP
collector and no decoder for NetFlow v9, IPFIX or sFlow. It does not publish
decoded messages to a message queue; `vflow.producer` holds no modules.
`vflow.mirror` builds headers and sends bytes, but does not compute
checksums or forward traffic on its own.