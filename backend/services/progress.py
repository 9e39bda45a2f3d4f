import logging

from schemas.catalog import Badge
from services.catalog import get_badges

logger = logging.getLogger(__name__)


class ProgressLedger:
    """Earned badge ids for the active user session.

    Append-only: ``award`` is the only mutator and it never removes. Awarding
    a badge that is already present is a no-op. Not persisted.
    """

    def __init__(self):
        self._earned: dict[str, None] = {}  # insertion-ordered set

    def award(self, badge_id: str) -> bool:
        """Add ``badge_id``; return True only if it was not already earned."""
        if badge_id in self._earned:
            return False
        self._earned[badge_id] = None
        logger.info("Badge awarded: %s", badge_id)
        return True

    def has(self, badge_id: str) -> bool:
        return badge_id in self._earned

    def earned(self) -> list[str]:
        """Badge ids in the order they were first awarded."""
        return list(self._earned)

    def badges(self) -> list[Badge]:
        catalog = get_badges()
        return [catalog[b] for b in self._earned if b in catalog]

    def __contains__(self, badge_id: str) -> bool:
        return self.has(badge_id)

    def __len__(self) -> int:
        return len(self._earned)
