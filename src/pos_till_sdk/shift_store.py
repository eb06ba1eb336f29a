from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models_shifts import Shift

logger = logging.getLogger(__name__)


@dataclass
class ShiftStore:
    """Persists the current shift reference across application restarts.

    Only the shift is stored here; the in-progress cart deliberately has no
    store. With ``enabled=False`` every call is a no-op.
    """

    app_name: str = "pos-till"
    filename: str = "current_shift.json"
    base_dir: Path | None = None
    enabled: bool = True

    def _path(self) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, "PosTill"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, shift: Shift) -> None:
        if not self.enabled:
            return
        path = self._path()
        path.write_text(shift.model_dump_json(indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            logger.debug("shift_store_chmod_unsupported", extra={"path": str(path)})

    def load(self) -> Shift | None:
        if not self.enabled:
            return None
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
            shift = Shift.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError):
            logger.warning("shift_store_corrupt", extra={"path": str(path)})
            self.clear()
            return None
        if not shift.is_open:
            self.clear()
            return None
        return shift

    def clear(self) -> None:
        if not self.enabled:
            return
        path = self._path()
        if path.exists():
            path.unlink()
