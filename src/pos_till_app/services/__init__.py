from .checkout_service import CheckoutResult, CheckoutService
from .errors import CheckoutServiceError, ShiftServiceError, StockServiceError, TillServiceError
from .shift_service import ShiftCloseResult, ShiftService
from .stock_service import StockAdjustmentOutcome, StockRow, StockService

__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "CheckoutServiceError",
    "ShiftCloseResult",
    "ShiftService",
    "ShiftServiceError",
    "StockAdjustmentOutcome",
    "StockRow",
    "StockService",
    "StockServiceError",
    "TillServiceError",
]
