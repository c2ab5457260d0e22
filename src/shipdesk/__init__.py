"""shipdesk public API."""

from typing import TYPE_CHECKING

__version__ = "0.1.0"

__all__ = [
    "Database",
    "ShipdeskConfig",
    "ShipdeskError",
    "ShipmentLedger",
    "ShipmentQueries",
    "__version__",
    "create_app",
    "register_exception_handlers",
]

if TYPE_CHECKING:
    from shipdesk.app import create_app
    from shipdesk.config import ShipdeskConfig
    from shipdesk.exceptions import ShipdeskError, register_exception_handlers
    from shipdesk.ledger import ShipmentLedger
    from shipdesk.queries import ShipmentQueries
    from shipdesk.storage.gateway import Database


def __getattr__(name: str):
    # Lazy imports to avoid loading all submodules on package import.
    if name == "ShipdeskConfig":
        from shipdesk.config import ShipdeskConfig

        return ShipdeskConfig
    if name == "create_app":
        from shipdesk.app import create_app

        return create_app
    if name == "Database":
        from shipdesk.storage.gateway import Database

        return Database
    if name == "ShipmentLedger":
        from shipdesk.ledger import ShipmentLedger

        return ShipmentLedger
    if name == "ShipmentQueries":
        from shipdesk.queries import ShipmentQueries

        return ShipmentQueries
    if name in ("ShipdeskError", "register_exception_handlers"):
        from shipdesk import exceptions

        return getattr(exceptions, name)
    raise AttributeError(f"module 'shipdesk' has no attribute {name!r}")
