"""
Shared fixtures: in-memory ZIP archives and photo factories.
"""

import io
import zipfile
from collections.abc import Callable, Sequence

import pytest

from photo_curator.models import ExtractedImage, Photo

Member = tuple[str, bytes, int]  # (name, data, zipfile compress_type)


def build_zip(members: Sequence[Member], comment: bytes = b"") -> bytes:
    """Build a ZIP archive in memory with the standard library writer."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data, compress_type in members:
            zf.writestr(name, data, compress_type=compress_type)
        zf.comment = comment
    return buffer.getvalue()


def central_header_offsets(archive: bytes) -> list[int]:
    """Offsets of every central directory header, in directory order."""
    offsets = []
    start = archive.find(b"PK\x01\x02")
    while start != -1:
        offsets.append(start)
        start = archive.find(b"PK\x01\x02", start + 4)
    return offsets


def local_header_offset(archive: bytes, index: int) -> int:
    """Local header offset of the index-th member."""
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return zf.infolist()[index].header_offset


def patch(archive: bytes, offset: int, data: bytes) -> bytes:
    """Overwrite bytes at offset."""
    return archive[:offset] + data + archive[offset + len(data):]


def image_bytes(tag: str, size: int = 64) -> bytes:
    """Fake image payload, distinct per tag."""
    seed = f"IMG:{tag}:".encode()
    return (seed * (size // len(seed) + 1))[:size]


def make_photo(photo_id: int, score: float = 0.0, comparisons: int = 0) -> Photo:
    """Photo with an empty payload, for ranking tests."""
    image = ExtractedImage(data=b"", media_type="image/jpeg", name=f"photo_{photo_id}.jpg")
    return Photo(photo_id=photo_id, payload=image, score=score, comparisons=comparisons)


@pytest.fixture
def photos() -> Callable[[int], list[Photo]]:
    """Factory for n fresh photos with ids 0..n-1."""
    def factory(n: int) -> list[Photo]:
        return [make_photo(i) for i in range(n)]
    return factory
