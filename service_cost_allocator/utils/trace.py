"""Run trace for allocations.

Every event is one JSON line::

    {"seq": 3, "timestamp": "...", "phase": "client_price",
     "company_id": "acme", "client_id": "A", "payload": {...}}

``seq`` numbers the events of one logger in write order. Client-level events
carry the weights behind one price.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..models import ClientPrice


@dataclass
class TraceLogger:
    path: Path
    enabled: bool = True
    _seq: int = field(default=0, init=False, repr=False)

    def log(
        self,
        phase: str,
        payload: Dict[str, Any],
        *,
        company_id: Optional[str] = None,
        client_id: Optional[str] = None,
    ) -> None:
        if not self.enabled:
            return

        if self._seq == 0:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._seq += 1

        event: Dict[str, Any] = {"seq": self._seq, "timestamp": datetime.now(timezone.utc).isoformat(), "phase": phase}
        if company_id:
            event["company_id"] = company_id
        if client_id:
            event["client_id"] = client_id
        event["payload"] = payload

        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event, ensure_ascii=False, default=str) + "\n")

    def log_client_price(self, price: "ClientPrice", *, company_id: Optional[str] = None) -> None:
        self.log(
            "client_price",
            {
                "name": price.name,
                "equipment_weight": price.equipment_weight,
                "services_weight": price.services_weight,
                "tariff_multiplier": price.tariff_multiplier,
                "sla_multiplier": price.sla_multiplier,
                "adjusted_weight": price.adjusted_weight,
                "final_price": price.final_price,
            },
            company_id=company_id,
            client_id=price.client_id,
        )


def build_trace_logger(path: Path | str, enabled: bool = True) -> TraceLogger:
    return TraceLogger(Path(path), enabled=enabled)


__all__ = ["TraceLogger", "build_trace_logger"]
