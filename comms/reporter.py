"""
Target reports to the robot controller over UDP.

One datagram per frame with a selected target, fire-and-forget:
``Distance=<f>:Angle=<f>:Tension=<f>`` followed by a NUL byte.
"""
from __future__ import annotations

import socket
import sys
from typing import Tuple

import hparams as HP


def format_report(distance: float, angle: float, tension: float) -> str:
    return f"Distance={distance:f}:Angle={angle:f}:Tension={tension:f}"


def encode_report(text: str) -> bytes:
    """ASCII payload, NUL-terminated for the controller's C string parser."""
    return text.encode("ascii") + b"\0"


class UdpReporter:
    """
    Sends report strings to a fixed ``(host, port)``.

    Send failures are logged and swallowed: a lost report only costs one
    frame, and the next frame sends a fresh one.
    """

    def __init__(self, host: str = HP.REPORT_HOST, port: int = HP.REPORT_PORT) -> None:
        if not 0 < port < 65536:
            raise ValueError(f"port must be in 1..65535, got {port}")
        self.host = host
        self.port = port
        self.sent_count = 0
        self.failed_count = 0

    @property
    def endpoint(self) -> Tuple[str, int]:
        return self.host, self.port

    def send(self, distance: float, angle: float, tension: float) -> bool:
        return self.send_text(format_report(distance, angle, tension))

    def send_text(self, text: str) -> bool:
        """Send one datagram; return ``False`` (after logging) on any socket error."""
        payload = encode_report(text)
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.sendto(payload, self.endpoint)
        except OSError as exc:
            self.failed_count += 1
            print(f"[Report] send to {self.host}:{self.port} failed: {exc}", file=sys.stderr)
            return False
        self.sent_count += 1
        return True
