"""
Record provenance

Author: Dicompel
Date: 2026-09-02
"""
from enum import Enum


class RecordOrigin(str, Enum):
    """Where a record was created: the remote store or this device only"""
    REMOTE = "remote"
    LOCAL = "local"
