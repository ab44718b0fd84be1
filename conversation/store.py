"""
In-memory conversation state store.

Holds at most one active state per user. Entries are timestamped on every
write and treated as gone once older than the TTL, so abandoned flows do not
accumulate. State is never persisted: a restart drops every open flow.
"""
import asyncio
import logging
import time

from config import SESSION_TTL_SECONDS

logger = logging.getLogger(__name__)

STORE_KEY = 'conversations'


class ConversationStore:
    def __init__(self, ttl_seconds=SESSION_TTL_SECONDS, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries = {}
        self._locks = {}

    def __len__(self):
        return len(self._entries)

    def __contains__(self, user_id):
        return self.get(user_id) is not None

    def _is_expired(self, touched_at):
        return self.ttl_seconds is not None and self._clock() - touched_at > self.ttl_seconds

    def get(self, user_id):
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        state, touched_at = entry
        if self._is_expired(touched_at):
            logger.info(f"⏰ Conversation for user {user_id} expired at step '{state.step}'")
            del self._entries[user_id]
            return None
        return state

    def set(self, user_id, state):
        previous = self._entries.get(user_id)
        if previous and type(previous[0]) is not type(state):
            logger.debug(f"User {user_id}: {previous[0].step} -> {state.step}")
        self._entries[user_id] = (state, self._clock())

    def delete(self, user_id):
        return self._entries.pop(user_id, None) is not None

    def lock(self, user_id) -> asyncio.Lock:
        """Per-user lock; handlers hold it for the whole transition"""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def sweep_expired(self):
        """Drop stale entries and idle locks, returning the number of expired states"""
        expired = [uid for uid, (_, touched_at) in self._entries.items() if self._is_expired(touched_at)]
        for user_id in expired:
            del self._entries[user_id]

        for user_id in [uid for uid, lock in self._locks.items() if uid not in self._entries and not lock.locked()]:
            del self._locks[user_id]

        if expired:
            logger.info(f"🧹 Swept {len(expired)} abandoned conversation(s)")
        return len(expired)


def get_conversations(context) -> ConversationStore:
    """Fetch the store for the current event from application-wide bot_data"""
    store = context.bot_data.get(STORE_KEY)
    if store is None:
        store = context.bot_data[STORE_KEY] = ConversationStore()
    return store
