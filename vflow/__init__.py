"""Network flow decoding, packet header parsing, mirroring headers and monitoring."""

__version__ = "0.9.0"