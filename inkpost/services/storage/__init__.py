"""Storage backends for uploaded files."""

from inkpost.services.storage.local import LocalStorage

__all__ = ["LocalStorage"]
