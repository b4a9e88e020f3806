"""SafeScan: employee medical profiles exposed through emergency QR codes."""

__version__ = "1.0.0"
