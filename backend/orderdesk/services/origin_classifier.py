"""
Origin classification for records

Records carry an explicit `origin` stamped by the repository that produced
them. Identifier shape is only a display fallback for legacy records that
predate the field: remote ids are UUIDs (36 chars), on-device ids are short
(`u1`, `p3`). A change in either id format breaks the heuristic.

Author: Dicompel
Date: 2026-09-04
"""
from typing import Optional

from orderdesk.core.config import settings
from orderdesk.domain.origin import RecordOrigin


def classify_origin(record_id: str, threshold: Optional[int] = None) -> RecordOrigin:
    """
    Classify an identifier by its shape

    Args:
        record_id: Record identifier
        threshold: Length above which an id is remote (defaults to settings)

    Returns:
        RecordOrigin.REMOTE if len(record_id) > threshold, else RecordOrigin.LOCAL
    """
    limit = settings.REMOTE_ID_MIN_LENGTH if threshold is None else threshold
    if len(record_id or "") > limit:
        return RecordOrigin.REMOTE
    return RecordOrigin.LOCAL


def resolve_origin(record) -> RecordOrigin:
    """Stored provenance when present, identifier shape otherwise"""
    origin = getattr(record, "origin", None)
    if origin is not None:
        return RecordOrigin(origin)
    return classify_origin(record.id)


def is_synced(record) -> bool:
    """True when the record is known to live in the remote store"""
    return resolve_origin(record) is RecordOrigin.REMOTE
