"""
Document Storage - candidate documents on private object storage.

This module provides:
- DocumentS3Storage: S3 backend with private ACL and signed URLs
- DocumentStorage: the ``store`` / ``delete`` adapter used by the upload flow
- StoredDocument: what the adapter hands back after a successful store

Usage:
    from core.storage import DocumentStorage

    storage = DocumentStorage()
    stored = storage.store(uploaded_file, public_id=f"{candidate.pk}_{millis}")
    storage.delete(stored.public_id)

Configuration:
    ``STORAGES['documents']`` selects the backend. Production points it at
    ``core.storage.DocumentS3Storage``; tests use ``FileSystemStorage``.
    - CANDIDATE_DOCUMENT_FOLDER: key prefix for stored documents
    - SECURE_STORAGE_URL_EXPIRY: signed URL expiry in seconds (default: 3600)
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from django.conf import settings
from django.core.files.storage import storages
from storages.backends.s3boto3 import S3Boto3Storage

from api.exceptions import StorageError

logger = logging.getLogger(__name__)


# Default URL expiry time in seconds (1 hour)
DEFAULT_URL_EXPIRY = getattr(settings, 'SECURE_STORAGE_URL_EXPIRY', 3600)


class DocumentS3Storage(S3Boto3Storage):
    """
    Secure S3 storage backend with private ACL.

    Files are never public; they are read through signed URLs.
    """

    default_acl = 'private'
    querystring_auth = True
    file_overwrite = False

    def __init__(self, **kwargs):
        kwargs['default_acl'] = 'private'
        kwargs['querystring_auth'] = True
        kwargs.setdefault('querystring_expire', DEFAULT_URL_EXPIRY)
        super().__init__(**kwargs)


@dataclass(frozen=True)
class StoredDocument:
    url: str
    public_id: str
    original_name: str = ''
    mime_type: str = ''
    size: int = 0

    def as_record(self, uploaded_at: datetime) -> Dict:
        """Shape stored on ``Candidate.documents[<type>]``."""
        return {
            'url': self.url,
            'public_id': self.public_id,
            'original_name': self.original_name,
            'mime_type': self.mime_type,
            'size': self.size,
            'uploaded_at': uploaded_at.isoformat(),
        }


class DocumentStorage:
    """
    Thin adapter over the ``documents`` storage backend.

    ``public_id`` is the backend name of the stored file and is what later
    deletes refer to.
    """

    def __init__(self, backend=None, folder: Optional[str] = None):
        self._backend = backend
        self.folder = folder or getattr(settings, 'CANDIDATE_DOCUMENT_FOLDER', 'recruiter-ai/candidates')

    @property
    def backend(self):
        if self._backend is None:
            self._backend = storages['documents']
        return self._backend

    def store(self, uploaded_file, public_id: str) -> StoredDocument:
        extension = os.path.splitext(uploaded_file.name or '')[1].lower()
        name = f"{self.folder}/{public_id}{extension}"

        try:
            saved_name = self.backend.save(name, uploaded_file)
            url = self.backend.url(saved_name)
        except Exception as e:
            logger.exception(f"Failed to store document {name}: {e}")
            raise StorageError() from e

        logger.info(f"Stored document {saved_name} ({uploaded_file.size} bytes)")
        return StoredDocument(
            url=url,
            public_id=saved_name,
            original_name=uploaded_file.name or '',
            mime_type=getattr(uploaded_file, 'content_type', '') or '',
            size=uploaded_file.size or 0,
        )

    def delete(self, public_id: str) -> None:
        try:
            self.backend.delete(public_id)
        except Exception as e:
            logger.exception(f"Failed to delete document {public_id}: {e}")
            raise StorageError() from e

        logger.info(f"Deleted document {public_id}")

    def discard(self, public_id: str) -> bool:
        """
        Compensating delete used on failed uploads.

        A failure here is logged and reported through the return value so
        that it never masks the error that triggered the cleanup.
        """
        try:
            self.delete(public_id)
        except StorageError:
            logger.error(f"Orphaned document left in storage: {public_id}")
            return False
        return True
