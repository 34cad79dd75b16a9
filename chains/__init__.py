# PATH: chains/__init__.py
"""
chains/ - Host chain layer.

Modules:
- state: in-process token ledger with atomic (revert-on-error) scopes
"""

from chains.state import ChainState

__all__ = [
    "ChainState",
]
