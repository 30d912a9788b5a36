"""
Cache-backed storage for audit wizard sessions.

Sessions expire after ``AUDIT_SESSION_TTL`` seconds without a write; an
expired or discarded session is simply gone, the same as a wizard the user
navigated away from.
"""
import logging

from django.conf import settings
from django.core.cache import cache

from .exceptions import AuditSessionNotFound
from .wizard import AuditWizard

logger = logging.getLogger('jewelcrm.audits')

SESSION_KEY_PREFIX = 'audit_session'
USER_INDEX_KEY_PREFIX = 'audit_sessions_for_user'


class AuditSessionStore:
    def __init__(self, backend=None, ttl=None):
        self.cache = backend or cache
        self.ttl = ttl or getattr(settings, 'AUDIT_SESSION_TTL', 60 * 60 * 24)

    def _key(self, session_id):
        return f"{SESSION_KEY_PREFIX}:{session_id}"

    def _index_key(self, user_id):
        return f"{USER_INDEX_KEY_PREFIX}:{user_id}"

    def save(self, wizard):
        self.cache.set(self._key(wizard.session_id), wizard.to_dict(), self.ttl)
        if wizard.created_by is not None:
            index = self.cache.get(self._index_key(wizard.created_by)) or []
            if wizard.session_id not in index:
                index.append(wizard.session_id)
            self.cache.set(self._index_key(wizard.created_by), index, self.ttl)
        return wizard

    def load(self, session_id):
        data = self.cache.get(self._key(session_id))
        if data is None:
            raise AuditSessionNotFound(f"Audit session {session_id} not found or expired")
        return AuditWizard.from_dict(data)

    def delete(self, session_id):
        wizard = self.load(session_id)
        self.cache.delete(self._key(session_id))
        if wizard.created_by is not None:
            index = self.cache.get(self._index_key(wizard.created_by)) or []
            if session_id in index:
                index.remove(session_id)
                self.cache.set(self._index_key(wizard.created_by), index, self.ttl)
        logger.debug(f"Audit session {session_id} discarded")
        return wizard

    def list_for_user(self, user_id):
        """Live sessions started by a user; expired ids are pruned from the index"""
        index = self.cache.get(self._index_key(user_id)) or []
        sessions = []
        live_ids = []
        for session_id in index:
            data = self.cache.get(self._key(session_id))
            if data is None:
                continue
            live_ids.append(session_id)
            sessions.append(AuditWizard.from_dict(data))
        if live_ids != index:
            self.cache.set(self._index_key(user_id), live_ids, self.ttl)
        return sessions


session_store = AuditSessionStore()
