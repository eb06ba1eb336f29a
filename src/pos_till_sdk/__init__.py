from .cart import Cart, LineItem
from .config import ClientConfig, ConfigError, PersistencePolicy, load_config
from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    InsufficientStockRejection,
    NotFoundError,
    OperationInFlightError,
    RejectionError,
    ServerError,
    ShiftAlreadyOpenError,
    ShiftNotOpenError,
    ShiftStateError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .idempotency import IdempotencyKeys, new_idempotency_keys
from .inflight import InFlightGuard
from .models import ApiEnvelope, Category, Customer, Operator, Product, ProductWithCategory
from .models_sales import Sale, SaleCreateRequest, SaleItemRequest
from .models_shifts import CashRegister, Shift, ShiftSummary
from .session import ApiSession
from .shift_state import ShiftReconciliation, ShiftState, ShiftStateMachine
from .shift_store import ShiftStore
from .stock_ledger import AdjustmentDirection, StockLedger, StockLevelRead, StockMovement, StockStatus, stock_status
from .tracing import TraceContext
from .ui_errors import ErrorCategory, UserFacingError, classify_error, to_user_facing_error
from .validation import ClientValidationError, ValidationIssue

__all__ = [
    "AdjustmentDirection",
    "ApiEnvelope",
    "ApiError",
    "ApiSession",
    "Cart",
    "CashRegister",
    "Category",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "ConflictError",
    "Customer",
    "ErrorCategory",
    "ForbiddenError",
    "HttpClient",
    "IdempotencyKeys",
    "InFlightGuard",
    "InsufficientStockError",
    "InsufficientStockRejection",
    "LineItem",
    "NotFoundError",
    "OperationInFlightError",
    "Operator",
    "PersistencePolicy",
    "Product",
    "ProductWithCategory",
    "RejectionError",
    "Sale",
    "SaleCreateRequest",
    "SaleItemRequest",
    "ServerError",
    "Shift",
    "ShiftAlreadyOpenError",
    "ShiftNotOpenError",
    "ShiftReconciliation",
    "ShiftState",
    "ShiftStateError",
    "ShiftStateMachine",
    "ShiftStore",
    "ShiftSummary",
    "StockLedger",
    "StockLevelRead",
    "StockMovement",
    "StockStatus",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "ValidationError",
    "ValidationIssue",
    "classify_error",
    "load_config",
    "new_idempotency_keys",
    "stock_status",
    "to_user_facing_error",
]
