"""Multipart form ingestion.

The body is read in full (up to the configured cap) and split into parts
before any part is looked at. Parts are then handled one at a time in
arrival order: file parts are type-checked and written to storage, plain
fields are decoded as UTF-8, and every result lands in one field map where
a later part overwrites an earlier one of the same name.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
import logging
from pathlib import PureWindowsPath
import re
from typing import TypeVar

from fastapi import Depends
from fastapi import Request
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser
from python_multipart.multipart import parse_options_header
from starlette.requests import ClientDisconnect

from directory_api.core.config import Settings
from directory_api.core.config import get_settings
from directory_api.core.errors import ParsingError
from directory_api.core.errors import PayloadTooLargeError
from directory_api.ingestion.rules import RequestModel
from directory_api.ingestion.rules import validate_request
from directory_api.ingestion.storage import FileStorage
from directory_api.ingestion.storage import get_file_storage

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=RequestModel)

FILE_FIELD = "avatar"
BODY_FIELD = "body"
ACCEPTED_FILE_TYPE_PREFIX = "image/"
DEFAULT_PART_CONTENT_TYPE = "application/octet-stream"

_EXTENSION = re.compile(r"[A-Za-z0-9]+")


async def _replay(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


@dataclass
class UploadedPart:
    """One segment of a multipart body."""

    name: str
    filename: str | None = None
    content_type: str | None = None
    stream: AsyncIterator[bytes] = field(default_factory=lambda: _replay([]))

    @property
    def is_file(self) -> bool:
        return self.filename is not None


def file_extension(filename: str) -> str | None:
    """Return the extension of the last path segment, or None when it is missing or unsafe."""
    suffix = PureWindowsPath(filename).suffix
    extension = suffix[1:]
    if not _EXTENSION.fullmatch(extension):
        return None
    return extension


async def drain(part: UploadedPart) -> bytes:
    """Accumulate a part's whole stream into one buffer."""
    buffer = bytearray()
    try:
        async for chunk in part.stream:
            buffer.extend(chunk)
    except (ClientDisconnect, OSError) as exc:
        raise ParsingError(FILE_FIELD, f"reading file error: {str(exc) or type(exc).__name__}") from exc
    return bytes(buffer)


async def ingest_part(part: UploadedPart, storage: FileStorage) -> str:
    """Turn one part into its field value: a stored-file path or the decoded text."""
    extension: str | None = None
    if part.is_file:
        declared = part.content_type or DEFAULT_PART_CONTENT_TYPE
        if not declared.startswith(ACCEPTED_FILE_TYPE_PREFIX):
            raise ParsingError(FILE_FIELD, f"invalid file type found: {declared}")
        extension = file_extension(part.filename)
        if extension is None:
            raise ParsingError(FILE_FIELD, f"invalid file name found: {part.filename}")

    data = await drain(part)

    if extension is not None:
        try:
            return await storage.save(extension, data)
        except OSError as exc:
            raise ParsingError(FILE_FIELD, f"error writing file: {exc}") from exc

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParsingError(part.name, f"invalid utf-8 sequence: {exc.reason}") from exc


async def ingest_parts(parts: Iterable[UploadedPart], storage: FileStorage) -> dict[str, str]:
    """Fold every part into a field map, strictly in arrival order."""
    fields: dict[str, str] = {}
    for part in parts:
        fields[part.name] = await ingest_part(part, storage)
    return fields


def _header_text(value: bytes) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParsingError(BODY_FIELD, f"invalid utf-8 sequence in part header: {exc.reason}") from exc


class _PartCollector:
    """Callback sink for ``MultipartParser`` that records complete parts."""

    def __init__(self) -> None:
        self.parts: list[UploadedPart] = []
        self._headers: dict[str, bytes] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()
        self._chunks: list[bytes] = []
        self.completed = False

    def callbacks(self) -> dict:
        return {
            "on_end": self.on_end,
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._chunks = []

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field.extend(data[start:end])

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.extend(data[start:end])

    def on_header_end(self) -> None:
        name = self._header_field.decode("latin-1").strip().lower()
        self._headers[name] = bytes(self._header_value).strip()
        self._header_field.clear()
        self._header_value.clear()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._chunks.append(bytes(data[start:end]))

    def on_part_end(self) -> None:
        _, options = parse_options_header(self._headers.get("content-disposition", b""))
        if b"name" not in options:
            raise ParsingError(BODY_FIELD, "part is missing a name in its Content-Disposition header")
        filename = options.get(b"filename")
        content_type = self._headers.get("content-type")
        self.parts.append(
            UploadedPart(
                name=_header_text(options[b"name"]),
                filename=_header_text(filename) if filename is not None else None,
                content_type=content_type.decode("latin-1") if content_type else None,
                stream=_replay(self._chunks),
            )
        )

    def on_end(self) -> None:
        self.completed = True


async def read_multipart(request: Request, *, max_bytes: int) -> list[UploadedPart]:
    """Read and split a multipart body, enforcing ``max_bytes`` before any part is handled."""
    media_type, options = parse_options_header(request.headers.get("content-type", ""))
    boundary = options.get(b"boundary")
    if media_type.lower() != b"multipart/form-data" or not boundary:
        raise ParsingError(BODY_FIELD, "Expected a multipart/form-data body with a boundary")

    declared_length = request.headers.get("content-length")
    if declared_length is not None and declared_length.isdigit() and int(declared_length) > max_bytes:
        raise PayloadTooLargeError(limit=max_bytes)

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    received = 0
    try:
        async for chunk in request.stream():
            received += len(chunk)
            if received > max_bytes:
                raise PayloadTooLargeError(limit=max_bytes)
            parser.write(chunk)
        parser.finalize()
        if not collector.completed:
            raise ParsingError(BODY_FIELD, "Malformed multipart body: missing closing boundary")
    except ClientDisconnect as exc:
        raise ParsingError(FILE_FIELD, "reading file error: client disconnected") from exc
    except MultipartParseError as exc:
        raise ParsingError(BODY_FIELD, f"Malformed multipart body: {exc}") from exc

    logger.debug("Read multipart body of %d bytes with %d parts", received, len(collector.parts))
    return collector.parts


def assemble_request(model_cls: type[ModelT], fields: dict[str, str], keys: Iterable[str]) -> ModelT:
    """Build ``model_cls`` from the recognized ``keys`` of the field map, then validate it."""
    payload = {key: fields[key] for key in keys if key in fields}
    return validate_request(model_cls.model_validate(payload))


def multipart_body(model_cls: type[ModelT], keys: Iterable[str]):
    """Build a FastAPI dependency that ingests a multipart form into ``model_cls``."""
    keys = tuple(keys)

    async def dependency(
        request: Request,
        settings: Settings = Depends(get_settings),
        storage: FileStorage = Depends(get_file_storage),
    ) -> ModelT:
        parts = await read_multipart(request, max_bytes=settings.max_upload_bytes)
        fields = await ingest_parts(parts, storage)
        return assemble_request(model_cls, fields, keys)

    dependency.__name__ = f"ingest_{model_cls.__name__.lower()}"
    return dependency
