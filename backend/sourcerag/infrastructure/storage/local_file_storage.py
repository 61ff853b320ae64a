"""Transient on-disk holding area for uploaded PDFs.

An upload lives at ``<upload_dir>/<tenant>/<name>_<UTC stamp>_<6 hex><ext>``
only while its ingestion runs; the endpoint removes it afterwards.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^\w\-]")


@dataclass
class StoredFile:
    stored_path: str
    filename: str
    original_filename: str
    file_size: int


def _safe_part(value: str, limit: int = 80) -> str:
    cleaned = _UNSAFE.sub("_", value)[:limit].strip("_")
    return cleaned or "unnamed"


def _unique_name(filename: str) -> str:
    original = Path(filename)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{_safe_part(original.stem)}_{stamp}_{uuid.uuid4().hex[:6]}{original.suffix}"


class LocalFileStorage:
    """Per-tenant folders under one upload root."""

    def __init__(self, upload_dir: str):
        self._root = Path(upload_dir)
        self._root.mkdir(parents=True, exist_ok=True)

    def _tenant_folder(self, tenant_id: str) -> Path:
        folder = self._root / _safe_part(tenant_id)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    async def store_file(self, content: bytes, filename: str, tenant_id: str) -> StoredFile:
        target = self._tenant_folder(tenant_id) / _unique_name(filename)
        target.write_bytes(content)
        logger.info("Stored upload for tenant %s: %s (%d bytes)", tenant_id, target.name, len(content))
        return StoredFile(
            stored_path=str(target),
            filename=target.name,
            original_filename=filename,
            file_size=len(content),
        )

    async def delete_file(self, stored_path: str) -> bool:
        """Remove a stored upload. False when it was already gone."""
        target = Path(stored_path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        logger.info("Removed upload %s", target.name)
        return True
