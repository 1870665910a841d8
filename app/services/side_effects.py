from dataclasses import dataclass
from typing import Optional


@dataclass
class SideEffectOutcome:
    """Result of a best-effort action run after an approval was committed."""
    name: str
    ok: bool
    error: Optional[str] = None
