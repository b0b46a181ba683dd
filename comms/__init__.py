from .reporter import UdpReporter, encode_report, format_report

__all__ = ["UdpReporter", "encode_report", "format_report"]
