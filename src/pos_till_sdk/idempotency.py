from __future__ import annotations

import uuid
from dataclasses import dataclass

IDEMPOTENCY_HEADER = "Idempotency-Key"


@dataclass(frozen=True)
class IdempotencyKeys:
    """Keys for one submission attempt.

    An operator-initiated retry of the same attempt reuses the keys so the
    backend can recognise the duplicate; a new attempt gets new keys.
    """

    transaction_id: str
    idempotency_key: str

    def headers(self) -> dict[str, str]:
        return {IDEMPOTENCY_HEADER: self.idempotency_key}


def new_idempotency_keys() -> IdempotencyKeys:
    return IdempotencyKeys(transaction_id=str(uuid.uuid4()), idempotency_key=str(uuid.uuid4()))


def resolve_idempotency_keys(transaction_id: str | None = None, idempotency_key: str | None = None) -> IdempotencyKeys:
    if transaction_id and idempotency_key:
        return IdempotencyKeys(transaction_id=transaction_id, idempotency_key=idempotency_key)
    generated = new_idempotency_keys()
    return IdempotencyKeys(
        transaction_id=transaction_id or generated.transaction_id,
        idempotency_key=idempotency_key or generated.idempotency_key,
    )
