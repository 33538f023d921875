"""eSim EDA suite installer.

Core design goals:
- Strictly sequential steps, each with a declared failure policy
- Fail fast on install, best effort on uninstall
- Missing bundled archives skip one component, not the run
- Run state (proxy, virtualenv, KiCad config dir) carried in an explicit context
- Centralized logging
"""

__all__ = []
