"""depstage - resolve build-source URIs into cached local directories."""

__version__ = "0.1.0"
