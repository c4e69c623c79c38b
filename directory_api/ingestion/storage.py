"""Durable storage for uploaded files."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
import logging
from pathlib import Path
import uuid

import aiofiles
import aiofiles.os as aiofiles_os
from fastapi import Depends

from directory_api.core.config import Settings
from directory_api.core.config import get_settings

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/storage"


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class FileStorage:
    """Append-only directory of uploads named ``<uuid>.<extension>``.

    Names never collide, so concurrent requests write without coordination.
    Files are never rewritten or removed once stored.
    """

    directory: Path
    public_prefix: str = PUBLIC_PREFIX
    id_factory: Callable[[], str] = field(default=_new_id)

    async def save(self, extension: str, data: bytes) -> str:
        """Write ``data`` under a fresh name and return its public relative path."""
        filename = f"{self.id_factory()}.{extension}"
        target = self.directory / filename
        # Readers only ever see complete files.
        partial = self.directory / f".{filename}.part"
        await aiofiles_os.makedirs(self.directory, exist_ok=True)
        async with aiofiles.open(partial, "wb") as handle:
            await handle.write(data)
        await aiofiles_os.replace(partial, target)
        logger.info("Stored upload %s (%d bytes)", filename, len(data))
        return f"{self.public_prefix}/{filename}"


def get_file_storage(settings: Settings = Depends(get_settings)) -> FileStorage:
    """Provide the configured upload storage for dependency injection."""
    return FileStorage(directory=settings.storage_dir)
