"""Object storage adapter for proof-of-delivery files."""

from django.core.files.storage import default_storage


class ProofStorage:

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def upload(self, path: str, file) -> str:
        """Store file at path and return its public URL."""
        name = self.storage.save(path, file)
        return self.storage.url(name)
