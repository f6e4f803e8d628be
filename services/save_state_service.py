"""
Save State Service - Snapshots and restores in-progress game sessions.

States are keyed by (game type, sorted deck ids); saving replaces any earlier
state under the same key. Loading drops references to cards deleted since the
save and reports "no state" when nothing playable is left.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from loguru import logger

from models.save_state import GameProgress, GameSaveState, GameType, save_state_key
from repositories.card_repository import CardRepository, get_card_repository
from repositories.save_state_repository import SaveStateRepository, get_save_state_repository
from utils.service_config import DEFAULT_MAX_SAVE_STATES, DEFAULT_SAVE_STATE_MAX_AGE_DAYS


def filter_stale_cards(progress: GameProgress, live_card_ids: set[str]) -> GameProgress | None:
    """
    Remove ids of deleted cards from a restored session.

    When cards were removed, ``current_index`` moves back by the number of
    removed cards that came before it and is clamped into the remaining order.

    Returns:
        The filtered progress, or None when a non-empty order filtered down to
        nothing (the caller should start a fresh game)
    """
    order = progress.card_order
    kept_order = [card_id for card_id in order if card_id in live_card_ids]
    removed_before = sum(
        1 for card_id in order[: max(progress.current_index, 0)] if card_id not in live_card_ids
    )
    if order and not kept_order:
        return None

    index = progress.current_index
    if len(kept_order) < len(order):
        index = min(max(index - removed_before, 0), len(kept_order) - 1)

    return GameProgress(
        current_index=index,
        counters=dict(progress.counters),
        outcome_sets={
            name: {card_id for card_id in ids if card_id in live_card_ids}
            for name, ids in progress.outcome_sets.items()
        },
        card_order=kept_order,
        extras=dict(progress.extras),
    )


class SaveStateService:
    """Service for saving, resuming and pruning game sessions."""

    def __init__(
        self,
        save_state_repository: SaveStateRepository | None = None,
        card_repository: CardRepository | None = None,
        max_save_states: int = DEFAULT_MAX_SAVE_STATES,
        max_age_days: int = DEFAULT_SAVE_STATE_MAX_AGE_DAYS,
    ):
        """
        Initialize the save state service.

        Args:
            save_state_repository: SaveStateRepository instance
            card_repository: CardRepository used to detect deleted cards on load
            max_save_states: Number of most recent states kept after each save
            max_age_days: Age after which ``clear_old`` drops a state
        """
        self.save_state_repo = save_state_repository or get_save_state_repository()
        self.card_repo = card_repository or get_card_repository()
        self.max_save_states = max_save_states
        self.max_age_days = max_age_days

    # ============= Save / Load =============

    def save(
        self,
        game_type: GameType | str,
        deck_ids: Iterable[str],
        progress: GameProgress,
        saved_at: datetime | None = None,
    ) -> GameSaveState:
        """Store ``progress``, replacing any state with the same key."""
        game_type, key_deck_ids = save_state_key(game_type, deck_ids)
        state = GameSaveState(
            game_type=game_type,
            deck_ids=key_deck_ids,
            progress=GameProgress.from_dict(progress.to_dict()),
            saved_at=saved_at or datetime.now(),
        )
        others = [s for s in self.save_state_repo.get_all() if s.key != state.key]
        kept = sorted([*others, state], key=lambda s: s.saved_at, reverse=True)
        self.save_state_repo.replace_all(kept[: self.max_save_states])
        self.save_state_repo.save()
        logger.info(f"Saved game state for {game_type.display_name} ({len(key_deck_ids)} deck(s))")
        return state

    def load(self, game_type: GameType | str, deck_ids: Iterable[str]) -> GameProgress | None:
        """
        Restore the progress saved under (game type, deck ids).

        Returns:
            The progress with deleted cards filtered out, or None when there is
            no usable state
        """
        key = save_state_key(game_type, deck_ids)
        state = self.save_state_repo.find(key)
        if state is None:
            return None
        progress = filter_stale_cards(state.progress, self.card_repo.ids())
        if progress is None:
            logger.warning(
                f"Saved {key[0].display_name} game only references deleted cards; ignoring it"
            )
            return None
        logger.debug(f"Loaded game state for {key[0].display_name}")
        return progress

    def exists(self, game_type: GameType | str, deck_ids: Iterable[str]) -> bool:
        return self.save_state_repo.find(save_state_key(game_type, deck_ids)) is not None

    def get_info(
        self, game_type: GameType | str, deck_ids: Iterable[str]
    ) -> tuple[datetime, int] | None:
        """Return (saved_at, deck count) for display, or None."""
        state = self.save_state_repo.find(save_state_key(game_type, deck_ids))
        if state is None:
            return None
        return state.saved_at, len(state.deck_ids)

    def list_save_states(self) -> list[GameSaveState]:
        return self.save_state_repo.get_all()

    # ============= Deletion =============

    def delete(self, game_type: GameType | str, deck_ids: Iterable[str]) -> bool:
        key = save_state_key(game_type, deck_ids)
        states = self.save_state_repo.get_all()
        remaining = [s for s in states if s.key != key]
        if len(remaining) == len(states):
            return False
        self.save_state_repo.replace_all(remaining)
        self.save_state_repo.save()
        logger.info(f"Deleted save state for {key[0].display_name}")
        return True

    def clear_all(self) -> None:
        self.save_state_repo.replace_all([])
        self.save_state_repo.save()
        logger.info("Cleared all save states")

    def clear_old(self, max_age_days: int | None = None, now: datetime | None = None) -> int:
        """
        Drop states older than ``max_age_days``.

        Returns:
            Number of states removed
        """
        cutoff = (now or datetime.now()) - timedelta(days=max_age_days or self.max_age_days)
        states = self.save_state_repo.get_all()
        remaining = [s for s in states if s.saved_at >= cutoff]
        removed = len(states) - len(remaining)
        if removed:
            self.save_state_repo.replace_all(remaining)
            self.save_state_repo.save()
            logger.info(f"Cleared {removed} old save state(s)")
        return removed


__all__ = ["SaveStateService", "filter_stale_cards"]
