"""kubexpose: expose local cluster services to the host."""

__version__ = "0.1.0"
