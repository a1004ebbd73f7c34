"""
Inventory services: stock, reservations and department transfers.
"""

from .exceptions import (
    InventoryServiceError,
    InventoryItemNotFoundError,
    InsufficientStockError,
    InvalidTransferError,
    MissingTransferInputError,
    TransferNotFoundError,
    InvalidTransferStateError,
)
from .stock import (
    get_inventory_item,
    record_movement,
    adjust_quantity,
    get_low_stock_items,
    get_inventory_stats,
    get_department_stock,
    check_department_availability,
    consume_department_stock,
    add_department_stock,
)
from .reservations import (
    reserve_for_order,
    consume_reservations,
    release_reservations,
)
from .transfers import (
    MAX_ITEMS,
    MAX_PRODUCT_ID_LENGTH,
    MAX_QUANTITY,
    get_transfer,
    create_transfer,
    approve_transfer,
    reject_transfer,
    list_transfers,
)

__all__ = [
    # Exceptions
    'InventoryServiceError',
    'InventoryItemNotFoundError',
    'InsufficientStockError',
    'InvalidTransferError',
    'MissingTransferInputError',
    'TransferNotFoundError',
    'InvalidTransferStateError',
    # Stock
    'get_inventory_item',
    'record_movement',
    'adjust_quantity',
    'get_low_stock_items',
    'get_inventory_stats',
    'get_department_stock',
    'check_department_availability',
    'consume_department_stock',
    'add_department_stock',
    # Reservations
    'reserve_for_order',
    'consume_reservations',
    'release_reservations',
    # Transfers
    'MAX_ITEMS',
    'MAX_PRODUCT_ID_LENGTH',
    'MAX_QUANTITY',
    'get_transfer',
    'create_transfer',
    'approve_transfer',
    'reject_transfer',
    'list_transfers',
]
