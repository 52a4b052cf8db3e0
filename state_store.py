import logging
import constants
from state_codec import encode, decode, query_from_url


class TimelineStore:
    """The current location of a session and the listeners following it.

    The query string is the single source of truth. Edits replace the
    current entry without adding a history entry and then notify every
    listener; ``back``/``forward`` walk the entries created by ``load`` and
    notify through the same path.
    """

    def __init__(self, query=''):
        self.logger = logging.getLogger(constants.LOGGER_NAME)
        self._entries = [query_from_url(query)]
        self._index = 0
        self._listeners = []

    @property
    def query(self):
        return self._entries[self._index]

    @property
    def history_length(self):
        return len(self._entries)

    def read_state(self):
        return decode(self.query)

    def push_state(self, state):
        query = encode(state)
        self._entries[self._index] = query
        self.logger.debug(f"[STORE] Replaced location: ?{query}")
        self._notify()
        return query

    def change(self, **changes):
        return self.push_state(self.read_state().with_changes(**changes))

    def load(self, query):
        """Navigates to a new URL, dropping any forward entries."""
        del self._entries[self._index + 1:]
        self._entries.append(query_from_url(query))
        self._index += 1
        self.logger.info(f"[STORE] Loaded location #{self._index}")
        self._notify()

    def back(self):
        if self._index == 0:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self):
        if self._index >= len(self._entries) - 1:
            return False
        self._index += 1
        self._notify()
        return True

    def subscribe(self, callback):
        self._listeners.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        state = self.read_state()
        for callback in list(self._listeners):
            try:
                callback(state)
            except Exception as e:
                self.logger.error(f"[STORE] Listener {callback!r} failed: {e}", exc_info=True)
