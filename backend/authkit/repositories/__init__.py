"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from authkit.repositories.base import BaseRepository
from authkit.repositories.user import UserRepository

__all__ = ["BaseRepository", "UserRepository"]
