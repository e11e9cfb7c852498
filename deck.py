"""
The action deck: what the app shows a signed-in user next.

It walks through the suggested actions one at a time, holds back when the
user already has enough actions in progress, and when suggestions run out
offers old done/declined/not-applicable actions again ("rehearsal").
Decisions the UI has to ask the user about come back as a Tip with a
Step other than SHOW; the matching answer_* method continues from there.
"""
import logging
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from client import YouPowerClient

logger = logging.getLogger(__name__)

PREFERRED_NUMBER_OF_ACTIONS = 3
MAX_NUMBER_OF_ACTIONS = 6
PAGE_STEP = 2
ROUTINE_ACTION_DURATION_WEEKS = 3
COMMENTS_PER_LOAD = 20
REHEARSE_BUCKETS = ("done", "declined", "na")


class Step(Enum):
    SHOW = "show"
    TOO_MANY = "too_many"
    CONFIRM_MORE = "confirm_more"
    NOTHING_TO_REHEARSE = "nothing_to_rehearse"
    CHANGE_SETTINGS = "change_settings"
    ASK_REHEARSE = "ask_rehearse"


Tip = namedtuple("Tip", ["step", "action"])


def _last(values: Any) -> str:
    if isinstance(values, list):
        return values[-1] if values else ""
    return values or ""


class ActionDeck:
    def __init__(self, client: YouPowerClient, user: Dict[str, Any]):
        self.client = client
        self.user = user
        self.user.setdefault("actions", {})
        self.max_number_show = {"inProgress": PAGE_STEP, "pending": PAGE_STEP, "done": PAGE_STEP}
        self.suggested_actions: List[Dict[str, Any]] = []
        self.idx = -1
        self.last_action_used = True
        self.actions: Dict[str, Dict[str, Any]] = {}
        self.comments: List[Dict[str, Any]] = []
        self.more_comments: Dict[str, bool] = {}

    # -------------------------------------------------------------------
    # User state
    # -------------------------------------------------------------------
    def bucket(self, name: str) -> Dict[str, Any]:
        return self.user["actions"].get(name) or {}

    @property
    def number_of_current_actions(self) -> int:
        return len(self.bucket("inProgress"))

    @property
    def to_rehearse(self) -> Dict[str, Optional[bool]]:
        profile = self.user.setdefault("profile", {})
        return profile.setdefault("toRehearse", {})

    def is_to_rehearse(self) -> bool:
        return any(self.to_rehearse.get(b) for b in REHEARSE_BUCKETS)

    def is_not_to_rehearse(self) -> bool:
        return all(self.to_rehearse.get(b) is False for b in REHEARSE_BUCKETS)

    def actions_by_type(self, type: str) -> List[Dict[str, Any]]:
        if type == "current":
            return sorted(self.bucket("inProgress").values(), key=lambda a: _last(a.get("startedDate")), reverse=True)
        if type == "pending":
            return sorted(self.bucket("pending").values(), key=lambda a: _last(a.get("postponedDate")))
        if type == "completed":
            return sorted(self.bucket("done").values(), key=lambda a: _last(a.get("latestDate")), reverse=True)
        raise ValueError(f"unknown action type {type!r}")

    def show_more(self, type: str) -> int:
        self.max_number_show[type] += PAGE_STEP
        size = len(self.bucket(type))
        if self.max_number_show[type] > size:
            self.max_number_show[type] = size
        return self.max_number_show[type]

    def show_less(self, type: str) -> int:
        self.max_number_show[type] -= PAGE_STEP
        if self.max_number_show[type] < PAGE_STEP:
            self.max_number_show[type] = PAGE_STEP
        return self.max_number_show[type]

    @staticmethod
    def add_days(days: Any = None) -> datetime:
        date = datetime.now(timezone.utc)
        if isinstance(days, (int, float)) and not isinstance(days, bool) and days:
            date += timedelta(days=days)
        return date

    @classmethod
    def routine_end_date(cls) -> datetime:
        """When a routine action started today has run its course."""
        return cls.add_days(ROUTINE_ACTION_DURATION_WEEKS * 7)

    # -------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------
    def load_action_details(self, actions: Any):
        items = actions.values() if isinstance(actions, dict) else actions
        for action in items:
            if action["_id"] not in self.actions:
                self.actions[action["_id"]] = self.client.action(action["_id"])

    def reload_actions(self):
        for action_id in list(self.actions):
            self.actions[action_id] = self.client.action(action_id)

    def load_suggested_actions(self):
        self.idx = -1
        self.last_action_used = True
        self.suggested_actions = self.client.suggested_actions()
        logger.debug("loaded %d suggested actions", len(self.suggested_actions))
        self.load_action_details(self.suggested_actions)

    def add_actions(self) -> Tip:
        """Entry point of the "add action" button."""
        current = self.number_of_current_actions
        if current < PREFERRED_NUMBER_OF_ACTIONS:
            return self.show_next_tip()
        if current > MAX_NUMBER_OF_ACTIONS - 1:
            return Tip(Step.TOO_MANY, None)
        return Tip(Step.CONFIRM_MORE, None)

    def answer_add_more(self, add_more: bool) -> Optional[Tip]:
        return self.show_next_tip() if add_more else None

    def show_next_tip(self) -> Tip:
        if self.last_action_used:
            self.idx += 1
            self.last_action_used = False

        if len(self.suggested_actions) > self.idx:
            return Tip(Step.SHOW, self.suggested_actions[self.idx])
        return self.check_rehearse()

    # -------------------------------------------------------------------
    # Rehearsal
    # -------------------------------------------------------------------
    def check_rehearse(self) -> Tip:
        if self.is_to_rehearse():
            return self.rehearse_actions()
        if self.is_not_to_rehearse():
            return Tip(Step.CHANGE_SETTINGS, None)
        return Tip(Step.ASK_REHEARSE, None)

    def answer_rehearse(self, rehearse: bool) -> Optional[Tip]:
        """Store the answer as the rehearsal setting; rehearse when it was yes."""
        self._set_rehearse_all(rehearse)
        return self.rehearse_actions() if rehearse else None

    def _set_rehearse_all(self, value: bool):
        self.to_rehearse.update({b: value for b in REHEARSE_BUCKETS})
        self.client.update_profile({"toRehearse": dict(self.to_rehearse)})

    def rehearse_actions(self) -> Tip:
        actions = []
        for name in REHEARSE_BUCKETS:
            if self.to_rehearse.get(name):
                actions.extend(self.bucket(name).values())

        if not actions:
            return Tip(Step.NOTHING_TO_REHEARSE, None)

        # oldest first
        actions.sort(key=lambda a: _last(a.get("latestDate")))
        self.idx = -1
        self.last_action_used = True
        self.suggested_actions = actions[:PREFERRED_NUMBER_OF_ACTIONS]
        self.load_action_details(self.suggested_actions)
        return self.show_next_tip()

    # -------------------------------------------------------------------
    # State changes
    # -------------------------------------------------------------------
    def set_suggested_action_state(self, action_id: str, state: str, postponed: Optional[datetime] = None):
        """Record the user's choice on the tip being shown.

        Suggestions are fetched again once the last one has been used, after
        the state change so the used action is already excluded.
        """
        self.last_action_used = True
        self.user["actions"] = self.client.set_action_state(action_id, state, postponed)
        if not len(self.suggested_actions) > self.idx + 1:
            self.load_suggested_actions()

    def post_action_state(self, action_id: str, state: str, postponed: Optional[datetime] = None):
        self.user["actions"] = self.client.set_action_state(action_id, state, postponed)

    # -------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------
    def load_all_comments(self, buckets: Dict[str, Dict[str, Any]]):
        for actions in buckets.values():
            self.load_comments_of_actions(actions)

    def load_comments_of_actions(self, actions: Dict[str, Any]):
        for action in actions.values():
            self.load_comments_by_action_id(action["_id"])

    def load_comments_by_action_id(self, action_id: str, skip: int = 0) -> List[Dict[str, Any]]:
        data = self.client.comments(action_id, limit=COMMENTS_PER_LOAD, skip=skip)
        self.comments.extend(data)
        self.more_comments[action_id] = len(data) >= COMMENTS_PER_LOAD
        return data

    def load_more_comments(self, action_id: str) -> List[Dict[str, Any]]:
        loaded = sum(1 for c in self.comments if c.get("actionId") == action_id)
        return self.load_comments_by_action_id(action_id, skip=loaded)

    def has_more_comments(self, action_id: str) -> bool:
        return self.more_comments.get(action_id, True)
