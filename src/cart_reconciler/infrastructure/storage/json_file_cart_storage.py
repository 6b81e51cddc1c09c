import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog

from cart_reconciler.core.application.exceptions import CartStorageError
from cart_reconciler.core.application.ports import LocalCartStoragePort
from cart_reconciler.core.domain.cart import LocalCartLine

logger = structlog.get_logger()


class JsonFileCartStorage(LocalCartStoragePort):
    """One JSON document per cart key: ``[{"product_variant_id": 7, "quantity": 2}, ...]``.

    Unreadable or malformed content reads as an empty cart. Writes are atomic
    (temp file in the same directory, then rename).
    """

    def __init__(self, store_dir: Path, cart_key: str) -> None:
        self.store_dir = Path(store_dir)
        self.file_path = self.store_dir / f"{cart_key}.json"

    async def get(self) -> list[LocalCartLine]:
        return [line for line in map(_parse_line, self._read_json()) if line is not None]

    async def set(self, lines: Sequence[LocalCartLine]) -> None:
        self._write_json(
            [{"product_variant_id": line.line_item_id, "quantity": line.quantity} for line in lines]
        )

    async def clear(self) -> None:
        try:
            self.file_path.unlink(missing_ok=True)
        except OSError as e:
            raise CartStorageError(
                f"Failed to clear local cart: {e}", context={"path": str(self.file_path)}
            ) from e

    def _read_json(self) -> list[Any]:
        if not self.file_path.exists():
            return []
        try:
            with open(self.file_path, encoding="utf-8") as f:
                content = f.read().strip()
            if not content:
                return []
            data = json.loads(content)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Local cart unreadable, treating as empty", path=str(self.file_path), error_details=str(e))
            return []
        if not isinstance(data, list):
            logger.warning("Local cart is not a list, treating as empty", path=str(self.file_path))
            return []
        return data

    def _write_json(self, data: list[dict[str, int]]) -> None:
        tmp_path: str | None = None
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile("w", dir=self.store_dir, delete=False, encoding="utf-8") as tmp:
                json.dump(data, tmp)
                tmp_path = tmp.name
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise CartStorageError(
                f"Failed to write local cart: {e}", context={"path": str(self.file_path)}
            ) from e


def _parse_line(raw: Any) -> LocalCartLine | None:
    if not isinstance(raw, dict):
        return None
    try:
        return LocalCartLine(int(raw["product_variant_id"]), int(raw["quantity"]))
    except (KeyError, TypeError, ValueError):
        return None
