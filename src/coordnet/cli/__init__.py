"""Command line interface for inspecting and querying coordinate networks.

Networks are read from YAML/JSON config files; results are printed as JSON.
"""

__all__ = []
