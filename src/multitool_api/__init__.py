"""Backend for the multitool site: video links, image, PDF and QR tools."""

__version__ = "0.1.0"
