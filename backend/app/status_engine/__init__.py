from app.status_engine.demurrage import days_remaining, demurrage_status
from app.status_engine.derivation import build_status_override, derive_status, is_overridden
from app.status_engine.display import LEGACY_STATUS_MAP, STATUS_CONFIG, normalize_status
from app.status_engine.exceptions import InvalidOverrideError

__all__ = [
    "LEGACY_STATUS_MAP",
    "STATUS_CONFIG",
    "InvalidOverrideError",
    "build_status_override",
    "days_remaining",
    "demurrage_status",
    "derive_status",
    "is_overridden",
    "normalize_status",
]
