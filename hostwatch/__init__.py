"""Host reachability monitor: TCP probes with a tri-state status table."""

__version__ = "0.1.0"
