from .assignment import (
    AssignmentError,
    ClaimResult,
    DeclineResult,
    DuplicateRejection,
    OrderAlreadyAssigned,
    OrderUnavailable,
    claim_order,
    decline_order,
)
from .checkout_orchestrator import (
    CartChangedError,
    CheckoutError,
    CheckoutResult,
    EmptyCartError,
    InvalidDeliveryAddressError,
    StockValidationError,
    VendorGroupFailure,
    checkout_cart,
    validate_delivery_address,
)
from .delivery_history import record_status_change
from .order_lifecycle import (
    InvalidOrderTransitionError,
    OrderLifecycleError,
    OrderNotFoundError,
    TransitionNotPermittedError,
    advance_order_status,
    can_transition,
    resolve_actor_kind,
    validate_transition,
)
from .ratings import DuplicateRatingError, RatingError, RatingNotAllowedError, rate_order
from .rejection_ledger import active_rejections, available_orders_for_courier, cooldown_window, is_excluded

__all__ = [
    "AssignmentError",
    "ClaimResult",
    "DeclineResult",
    "DuplicateRejection",
    "OrderAlreadyAssigned",
    "OrderUnavailable",
    "claim_order",
    "decline_order",
    "CartChangedError",
    "CheckoutError",
    "CheckoutResult",
    "EmptyCartError",
    "InvalidDeliveryAddressError",
    "StockValidationError",
    "VendorGroupFailure",
    "checkout_cart",
    "validate_delivery_address",
    "record_status_change",
    "InvalidOrderTransitionError",
    "OrderLifecycleError",
    "OrderNotFoundError",
    "TransitionNotPermittedError",
    "advance_order_status",
    "can_transition",
    "resolve_actor_kind",
    "validate_transition",
    "DuplicateRatingError",
    "RatingError",
    "RatingNotAllowedError",
    "rate_order",
    "active_rejections",
    "available_orders_for_courier",
    "cooldown_window",
    "is_excluded",
]
