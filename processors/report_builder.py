# =============================================================================
# processors/report_builder.py - Report model assembly and armored payload
# =============================================================================

import base64
import binascii
import json
from datetime import datetime
from typing import Any, Dict, Iterable

from core.models import Account, AggregateStats, ReportModel


class ReportModelBuilder:
    """Assembles the model handed to the report renderer"""

    def build(self, accounts: Iterable[Account], stats: AggregateStats,
              generated_at: datetime) -> ReportModel:
        return ReportModel(
            generated_at=generated_at.isoformat(timespec='seconds'),
            accounts=tuple(accounts),
            stats=stats,
        )


def to_json(model: ReportModel) -> str:
    """Deterministic compact JSON for the model"""
    return json.dumps(model.to_dict(), ensure_ascii=False, separators=(',', ':'))


def to_armored(model: ReportModel) -> str:
    """
    Base64 of the UTF-8 JSON document.

    The result is plain ASCII, so it can be dropped into an HTML <script>
    block or attribute without escaping.
    """
    return base64.b64encode(to_json(model).encode('utf-8')).decode('ascii')


def decode_armored(payload: str) -> bytes:
    """Return the exact JSON bytes behind an armored payload"""
    try:
        return base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid armored report payload: {e}") from e


def load_armored(payload: str) -> Dict[str, Any]:
    return json.loads(decode_armored(payload).decode('utf-8'))
