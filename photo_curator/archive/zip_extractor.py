"""
ZIP archive extractor.

Reads the container straight from raw bytes: locates the end-of-central-directory
record, walks the central directory, resolves each local header and decodes
stored or raw-deflate payloads. Only image members are returned.
"""

import struct
import threading
import zlib
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

from ..exceptions import (
    ArchiveEntryError,
    BadLocalHeaderError,
    DecompressionError,
    ExtractionCancelledError,
    NoDirectoryError,
    UnsupportedCompressionError,
)
from ..logging_config import get_logger
from ..models import ArchiveEntry, ExtractedImage

# Module-level logger
logger = get_logger("zip_extractor")

EOCD_SIGNATURE = b"PK\x05\x06"  # 0x06054B50
CENTRAL_DIR_SIGNATURE = 0x02014B50
LOCAL_HEADER_SIGNATURE = 0x04034B50

EOCD_SIZE = 22
CENTRAL_DIR_HEADER_SIZE = 46
LOCAL_HEADER_SIZE = 30

METHOD_STORED = 0
METHOD_DEFLATE = 8

INFLATE_CHUNK_SIZE = 64 * 1024

IMAGE_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}
DEFAULT_MEDIA_TYPE = "image/jpeg"


def is_image_name(name: str) -> bool:
    """True for non-directory members with an accepted image extension."""
    if name.endswith("/"):
        return False
    lowered = name.lower()
    return any(lowered.endswith(ext) for ext in IMAGE_MEDIA_TYPES)


def media_type_for(name: str) -> str:
    """Infer the media type from the member name's extension."""
    _, dot, ext = name.lower().rpartition(".")
    if not dot:
        return DEFAULT_MEDIA_TYPE
    return IMAGE_MEDIA_TYPES.get(f".{ext}", DEFAULT_MEDIA_TYPE)


class ZipArchiveExtractor:
    """
    Extracts image payloads from an in-memory ZIP archive.

    Missing end-of-central-directory is the only fatal condition. Every other
    problem is confined to its entry: the entry is logged and skipped, and the
    walk continues.

    Thread Safety: extract() holds no state between calls. With max_workers > 1
    entries are inflated on a thread pool, but results are always returned in
    central directory order.
    """

    def __init__(self, max_workers: int = 1):
        """
        Initialize ZIP extractor.

        Args:
            max_workers: Number of threads used to decode entries
        """
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers: int = max_workers

    def extract(self, buffer: bytes, cancel: threading.Event | None = None) -> list[ExtractedImage]:
        """
        Decode every image member of the archive.

        Args:
            buffer: Complete ZIP file contents
            cancel: Optional event; once set, no further entries are decoded

        Returns:
            Decoded images in central directory order (possibly empty)

        Raises:
            NoDirectoryError: If the end-of-central-directory record is missing
        """
        eocd_offset = self._find_eocd(buffer)
        entries = [entry for entry in self._iter_central_directory(buffer, eocd_offset) if is_image_name(entry.name)]
        logger.debug(f"Central directory lists {len(entries)} image entries")

        def decode(entry: ArchiveEntry) -> ExtractedImage | None:
            if cancel is not None and cancel.is_set():
                return None
            return self._decode_entry(buffer, entry, cancel)

        if self.max_workers > 1 and len(entries) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                decoded = list(executor.map(decode, entries))
        else:
            decoded = []
            for entry in entries:
                if cancel is not None and cancel.is_set():
                    logger.info(f"Extraction cancelled after {len(decoded)} of {len(entries)} entries")
                    break
                decoded.append(decode(entry))

        images = [image for image in decoded if image is not None]
        logger.info(f"Extracted {len(images)} images from {len(entries)} image entries")
        return images

    def _find_eocd(self, buffer: bytes) -> int:
        """Scan backward for the end-of-central-directory signature."""
        if len(buffer) < EOCD_SIZE:
            raise NoDirectoryError(f"Buffer too small for a ZIP archive ({len(buffer)} bytes)")

        # A record starting at len - EOCD_SIZE is the last possible position
        offset = buffer.rfind(EOCD_SIGNATURE, 0, len(buffer) - EOCD_SIZE + len(EOCD_SIGNATURE))
        if offset == -1:
            raise NoDirectoryError("Invalid ZIP file: end of central directory not found")
        return offset

    def _iter_central_directory(self, buffer: bytes, eocd_offset: int) -> Iterator[ArchiveEntry]:
        """Walk central directory entries until the count or a bad signature ends it."""
        total_entries, dir_size, dir_offset = struct.unpack_from("<HII", buffer, eocd_offset + 10)
        logger.debug(f"EOCD at {eocd_offset}: {total_entries} entries, {dir_size} bytes at offset {dir_offset}")

        cursor = dir_offset
        for index in range(total_entries):
            if cursor + CENTRAL_DIR_HEADER_SIZE > len(buffer):
                logger.warning(f"Central directory truncated at entry {index}")
                return
            (signature,) = struct.unpack_from("<I", buffer, cursor)
            if signature != CENTRAL_DIR_SIGNATURE:
                logger.debug(f"Central directory ends early at entry {index} (offset {cursor})")
                return

            (method,) = struct.unpack_from("<H", buffer, cursor + 10)
            compressed_size, uncompressed_size, name_len, extra_len, comment_len = struct.unpack_from(
                "<IIHHH", buffer, cursor + 20
            )
            (local_offset,) = struct.unpack_from("<I", buffer, cursor + 42)

            name_start = cursor + CENTRAL_DIR_HEADER_SIZE
            name = buffer[name_start:name_start + name_len].decode("utf-8", errors="replace")

            yield ArchiveEntry(
                name=name,
                compression_method=method,
                compressed_size=compressed_size,
                uncompressed_size=uncompressed_size,
                local_header_offset=local_offset,
            )

            cursor = name_start + name_len + extra_len + comment_len

    def _decode_entry(
        self, buffer: bytes, entry: ArchiveEntry, cancel: threading.Event | None
    ) -> ExtractedImage | None:
        """Decode one entry, converting per-entry failures into a skip."""
        try:
            payload = self._read_payload(buffer, entry)
            data = self._decompress(entry, payload, cancel)
        except ArchiveEntryError as e:
            logger.warning(f"Skipping {entry.name}: {e}")
            return None

        if len(data) != entry.uncompressed_size:
            logger.debug(
                f"{entry.name}: decoded {len(data)} bytes, directory says {entry.uncompressed_size}"
            )
        return ExtractedImage(data=data, media_type=media_type_for(entry.name), name=entry.name)

    def _read_payload(self, buffer: bytes, entry: ArchiveEntry) -> bytes:
        """Resolve the local header and slice the raw member data."""
        offset = entry.local_header_offset
        if offset + LOCAL_HEADER_SIZE > len(buffer):
            raise BadLocalHeaderError(f"local header offset {offset} is past end of archive")

        (signature,) = struct.unpack_from("<I", buffer, offset)
        if signature != LOCAL_HEADER_SIGNATURE:
            raise BadLocalHeaderError(f"invalid local file header signature 0x{signature:08x}")

        name_len, extra_len = struct.unpack_from("<HH", buffer, offset + 26)
        data_start = offset + LOCAL_HEADER_SIZE + name_len + extra_len
        return buffer[data_start:data_start + entry.compressed_size]

    def _decompress(self, entry: ArchiveEntry, payload: bytes, cancel: threading.Event | None) -> bytes:
        """Decode the member payload according to its compression method."""
        if entry.compression_method == METHOD_STORED:
            return bytes(payload)
        if entry.compression_method == METHOD_DEFLATE:
            return b"".join(self._inflate_chunks(payload, cancel))
        raise UnsupportedCompressionError(f"unsupported compression method {entry.compression_method}")

    def _inflate_chunks(self, payload: bytes, cancel: threading.Event | None) -> Iterator[bytes]:
        """Stream a raw deflate payload through the decoder, yielding output chunks in order."""
        decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
        try:
            for start in range(0, len(payload), INFLATE_CHUNK_SIZE):
                if cancel is not None and cancel.is_set():
                    raise ExtractionCancelledError("cancelled during decompression")
                chunk = decompressor.decompress(payload[start:start + INFLATE_CHUNK_SIZE])
                if chunk:
                    yield chunk
            tail = decompressor.flush()
            if tail:
                yield tail
        except zlib.error as e:
            raise DecompressionError(f"decompression failed: {e}") from e

        if not decompressor.eof:
            raise DecompressionError("deflate stream is truncated")


def extract_archive(buffer: bytes, max_workers: int = 1) -> list[ExtractedImage]:
    """Decode all image members of a ZIP buffer. Raises NoDirectoryError if it is not a ZIP."""
    return ZipArchiveExtractor(max_workers=max_workers).extract(buffer)
