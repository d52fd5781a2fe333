"""JSON-file-backed implementation of PendingPaymentRepository."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from storefront.domain.model.payment import PaymentProvider, PendingPayment
from storefront.domain.repository.pending_payment_repository import (
    PendingPaymentRepository,
)

logger = logging.getLogger(__name__)


class JsonPendingPaymentRepository(PendingPaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- PendingPaymentRepository interface -----------------------------------

    def get(self, payment_id: str) -> PendingPayment | None:
        for raw in self._load_raw():
            if raw.get("payment_id") != payment_id:
                continue
            try:
                return self._to_domain(raw)
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning("Unreadable pending payment %s (%r)", payment_id, exc)
                return None
        return None

    def save(self, pending: PendingPayment) -> None:
        records = [r for r in self._load_raw() if r.get("payment_id") != pending.payment_id]
        records.append(self._to_raw(pending))
        self._persist_raw(records)

    def delete(self, payment_id: str) -> None:
        records = self._load_raw()
        kept = [r for r in records if r.get("payment_id") != payment_id]
        if len(kept) != len(records):
            self._persist_raw(kept)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(pending: PendingPayment) -> dict:
        return {
            "payment_id": pending.payment_id,
            "order_id": pending.order_id,
            "provider": pending.provider.value,
            "created_at": pending.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> PendingPayment:
        return PendingPayment(
            payment_id=raw["payment_id"],
            order_id=raw["order_id"],
            provider=PaymentProvider(raw.get("provider", PaymentProvider.WALLET.value)),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            records = json.loads(self._file_path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.warning(
                "Discarding unreadable pending payments at %s (%r)", self._file_path, exc
            )
            return []
        if not isinstance(records, list):
            return []
        return [r for r in records if isinstance(r, dict)]

    def _persist_raw(self, records: list[dict]) -> None:
        tmp_path = self._file_path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
        tmp_path.replace(self._file_path)

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
