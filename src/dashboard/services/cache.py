import logging
from uuid import uuid4

logger = logging.getLogger(__name__)


class PageCache:
    """Rendered view payloads, grouped by view path.

    Sits on a Flask-Caching backend, which bounds the number of entries and
    expires them. A path can hold several variants (one per search query and
    page, say). Each path has a version token that is part of every variant's
    key; ``revalidate_path`` swaps the token, so none of the old variants can
    be read again and they age out of the backend.
    """

    def __init__(self, backend):
        self.backend = backend

    def _version_key(self, path):
        return f"page-version:{path}"

    def _entry_key(self, path, version, key):
        return f"page:{path}:{version}:{key}"

    def get(self, path, key=""):
        version = self.backend.get(self._version_key(path))
        if version is None:
            return None
        return self.backend.get(self._entry_key(path, version, key))

    def set(self, path, value, key=""):
        version = self.backend.get(self._version_key(path))
        if version is None:
            version = self._new_version(path)
        self.backend.set(self._entry_key(path, version, key), value)

    def revalidate_path(self, path):
        self._new_version(path)
        logger.debug(f"Revalidated {path}")

    def clear(self):
        self.backend.clear()

    def _new_version(self, path):
        version = uuid4().hex
        self.backend.set(self._version_key(path), version)
        return version
