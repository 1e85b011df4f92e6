"""jumperroute - jumper-aware congestion resolution for PCB autorouting."""

__version__ = "0.1.0"
