from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import NotFoundError, ShiftNotOpenError
from ..idempotency import resolve_idempotency_keys
from ..models_shifts import CashRegister, Shift, ShiftCloseRequest, ShiftOpenRequest, ShiftSummary
from .base import BaseClient, _coerce_model, _expect_dict, _expect_list


@dataclass
class ShiftsClient(BaseClient):
    def list_registers(self) -> list[CashRegister]:
        data = self._call("GET", "cash-registers", module="shifts", operation="list_registers")
        return [CashRegister.model_validate(row) for row in _expect_list(data, "cash registers")]

    def list_shifts(self) -> list[Shift]:
        data = self._call("GET", "shifts", module="shifts", operation="list")
        return [Shift.model_validate(row) for row in _expect_list(data, "shifts")]

    def get_current_shift(self, user_id: str) -> Shift | None:
        """Return the operator's open shift, or ``None`` when there is none."""
        try:
            data = self._call("GET", f"shifts/current/{user_id}", module="shifts", operation="current")
        except (NotFoundError, ShiftNotOpenError):
            return None
        if data is None:
            return None
        return Shift.model_validate(_expect_dict(data, "current shift"))

    def open_shift(
        self,
        payload: ShiftOpenRequest | Mapping[str, Any],
        transaction_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> Shift:
        request = _coerce_model(payload, ShiftOpenRequest)
        keys = resolve_idempotency_keys(transaction_id, idempotency_key)
        data = self._call(
            "POST",
            "shifts/open",
            json_body=request.model_dump(mode="json", exclude_none=True),
            headers=keys.headers(),
            module="shifts",
            operation="open",
        )
        return Shift.model_validate(_expect_dict(data, "shift open"))

    def close_shift(
        self,
        shift_id: str,
        payload: ShiftCloseRequest | Mapping[str, Any],
        transaction_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> ShiftSummary:
        request = _coerce_model(payload, ShiftCloseRequest)
        keys = resolve_idempotency_keys(transaction_id, idempotency_key)
        data = self._call(
            "POST",
            f"shifts/{shift_id}/close",
            json_body=request.model_dump(mode="json", exclude_none=True),
            headers=keys.headers(),
            module="shifts",
            operation="close",
        )
        data = _expect_dict(data, "shift close")
        # Some deployments answer with the bare closed shift instead of a summary.
        if "shift" not in data:
            data = {"shift": data}
        return ShiftSummary.model_validate(data)
