"""
Wiring helpers: genesis loading for ledgers + pool.
"""

from .genesis import Genesis, GenesisError, build_genesis, load_genesis

__all__ = ["Genesis", "GenesisError", "build_genesis", "load_genesis"]
