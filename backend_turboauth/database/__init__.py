"""
Database layer — persists registry storage (wallet records, admin, upgrade
pointer) across restarts. SQLite by default; any SQLAlchemy URL works.
"""

from backend_turboauth.database.registry_store import (
    RegistryMeta,
    RegistryStore,
    WalletAuthRow,
)

__all__ = [
    "RegistryMeta",
    "RegistryStore",
    "WalletAuthRow",
]
