"""
War Room AI conversations.

Transcripts live in the "chat" cache keyed by session id, so they expire
after CHAT_SESSION_TTL of inactivity and the cache backend culls the oldest
sessions past its MAX_ENTRIES. Each transcript is capped at
CHAT_MAX_MESSAGES entries.
"""
import logging
import uuid

from django.conf import settings
from django.core.cache import caches
from django.utils import timezone

from . import ai

logger = logging.getLogger(__name__)


class ChatBusy(Exception):
    """Another turn for the same session is still waiting on the model."""


def new_session_id():
    return f"session-{uuid.uuid4().hex}"


def make_message(role, text):
    return {
        "id": uuid.uuid4().hex,
        "role": role,
        "text": text,
        "timestamp": timezone.now().isoformat(),
    }


class ChatStore:
    key_prefix = "war-room"

    def __init__(self, cache=None, ttl=None, max_messages=None, lock_timeout=None):
        self.cache = cache or caches["chat"]
        self.ttl = ttl or settings.CHAT_SESSION_TTL
        self.max_messages = max_messages or settings.CHAT_MAX_MESSAGES
        # expires on its own if a turn dies while holding it
        self.lock_timeout = lock_timeout or settings.EXTERNAL_API_TIMEOUT * 2

    def _key(self, session_id):
        return f"{self.key_prefix}:{session_id}"

    def _lock_key(self, session_id):
        return f"{self._key(session_id)}:lock"

    def _save(self, session_id, transcript):
        self.cache.set(self._key(session_id), transcript[-self.max_messages:], self.ttl)

    def create(self, session_id=None):
        session_id = session_id or new_session_id()
        self._save(session_id, [make_message("model", ai.CHAT_INTRO)])
        return session_id

    def get(self, session_id):
        if not session_id:
            return None
        return self.cache.get(self._key(session_id))

    def get_or_create(self, session_id=None):
        transcript = self.get(session_id)
        if transcript is None:
            session_id = self.create(session_id)
            transcript = self.get(session_id)
        return session_id, transcript

    def send(self, session_id, text):
        """
        Append one user entry and one model entry to the transcript.

        Returns (session_id, model_entry, status). The model entry is never
        empty: failures are replaced with a fixed fallback line.

        Raises ChatBusy while another turn holds the session.
        """
        session_id = session_id or new_session_id()
        lock_key = self._lock_key(session_id)
        # one turn per session between reading and writing the transcript
        if not self.cache.add(lock_key, True, self.lock_timeout):
            raise ChatBusy(session_id)
        try:
            return self._turn(session_id, text)
        finally:
            self.cache.delete(lock_key)

    def _turn(self, session_id, text):
        session_id, transcript = self.get_or_create(session_id)
        transcript.append(make_message("user", text))

        status = ai.STATUS_OK
        try:
            reply = ai.chat_reply(transcript)
            if not reply:
                reply = ai.CHAT_EMPTY_REPLY
                status = ai.STATUS_FALLBACK
        except Exception as e:
            logger.error("War Room chat call failed for %s: %s", session_id, e)
            reply = ai.CHAT_FALLBACK_REPLY
            status = ai.STATUS_FAILED

        model_entry = make_message("model", reply)
        transcript.append(model_entry)
        self._save(session_id, transcript)
        return session_id, model_entry, status
