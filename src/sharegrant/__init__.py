"""ShareGrant - access control lists for shared tables and maps."""

__version__ = "0.1.0"
