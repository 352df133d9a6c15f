from .catalog import InventoryItem, Service
from .sales import OpenSale, ClosedSale
from .auth import Operator, SessionToken

__all__ = [
    'InventoryItem', 'Service',
    'OpenSale', 'ClosedSale',
    'Operator', 'SessionToken',
]
