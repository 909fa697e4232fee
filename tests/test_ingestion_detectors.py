"""Tests for media classification and fingerprinting."""

import hashlib
from pathlib import Path

import pytest

from shoebox.ingestion.detectors import HASH_PREFIX_BYTES, HashComputer, MediaClassifier
from shoebox.ingestion.models import MediaCategory


@pytest.mark.parametrize(
    ("extension", "expected"),
    [
        (".jpg", MediaCategory.PHOTO),
        (".JPEG", MediaCategory.PHOTO),
        ("ARW", MediaCategory.PHOTO),
        (".hif", MediaCategory.PHOTO),
        (".MP4", MediaCategory.VIDEO),
        (".mkv", MediaCategory.VIDEO),
        (".wav", MediaCategory.AUDIO),
        (".LRF", MediaCategory.SIDECAR),
        (".json", MediaCategory.SIDECAR),
        (".txt", MediaCategory.UNSUPPORTED),
        ("", MediaCategory.UNSUPPORTED),
    ],
)
def test_classify_is_case_insensitive(extension: str, expected: MediaCategory) -> None:
    assert MediaClassifier().classify(extension) is expected


def test_eligibility_rules() -> None:
    classifier = MediaClassifier()

    assert classifier.is_eligible_for_organizing(".xmp")
    assert classifier.is_eligible_for_organizing(".mp3")
    assert not classifier.is_eligible_for_organizing(".pdf")

    assert classifier.is_eligible_for_metadata_date(".NEF")
    assert not classifier.is_eligible_for_metadata_date(".mov")
    assert not classifier.is_eligible_for_metadata_date(".xmp")


def test_hash_covers_only_leading_bytes(tmp_path: Path) -> None:
    prefix = b"a" * HASH_PREFIX_BYTES
    first = tmp_path / "first.mov"
    second = tmp_path / "second.mov"
    first.write_bytes(prefix + b"tail-one")
    second.write_bytes(prefix + b"a different and longer tail")

    hasher = HashComputer()

    assert hasher.compute(first) == hasher.compute(second)
    assert hasher.compute(first) == hashlib.md5(prefix).hexdigest()


def test_hash_of_small_and_missing_files(tmp_path: Path) -> None:
    small = tmp_path / "small.jpg"
    small.write_bytes(b"tiny")
    hasher = HashComputer()

    assert hasher.compute(small) == hashlib.md5(b"tiny").hexdigest()
    assert hasher.compute(tmp_path / "missing.jpg") == ""
