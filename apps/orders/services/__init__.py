"""
Orders app services layer.
"""

from .exceptions import (
    OrdersServiceError,
    OrderNotFoundError,
    CustomerNotFoundError,
    OrderLineNotFoundError,
    InvalidOrderError,
    InvalidOrderStateError,
    DiscountNotFoundError,
    PaymentError,
)

from .order_management import (
    generate_order_number,
    get_customer,
    get_order,
    get_order_detail,
    list_orders,
    create_order,
    apply_discount,
    add_line_item,
    remove_line_item,
    update_order_status,
    cancel_order,
    refund_order,
    get_order_stats,
)

from .payments import (
    get_total_paid,
    record_payment,
    get_payment_summary,
)

from .settlement import (
    get_open_orders,
    settle_order,
    get_settlement_summary,
    batch_settle,
    get_customer_balance,
    get_daily_settlement_report,
)

from .fulfillment import (
    get_department_stats,
    get_department_orders,
    get_department_pending_items,
    update_department_fulfillment,
    mark_line_in_progress,
    complete_line_fulfillment,
)


__all__ = [
    # Exceptions
    'OrdersServiceError',
    'OrderNotFoundError',
    'CustomerNotFoundError',
    'OrderLineNotFoundError',
    'InvalidOrderError',
    'InvalidOrderStateError',
    'DiscountNotFoundError',
    'PaymentError',

    # Orders
    'generate_order_number',
    'get_customer',
    'get_order',
    'get_order_detail',
    'list_orders',
    'create_order',
    'apply_discount',
    'add_line_item',
    'remove_line_item',
    'update_order_status',
    'cancel_order',
    'refund_order',
    'get_order_stats',

    # Payments
    'get_total_paid',
    'record_payment',
    'get_payment_summary',

    # Settlement
    'get_open_orders',
    'settle_order',
    'get_settlement_summary',
    'batch_settle',
    'get_customer_balance',
    'get_daily_settlement_report',

    # Fulfillment
    'get_department_stats',
    'get_department_orders',
    'get_department_pending_items',
    'update_department_fulfillment',
    'mark_line_in_progress',
    'complete_line_fulfillment',
]
