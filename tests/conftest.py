"""Shared fixtures for the Sift test suite."""

from __future__ import annotations

import os

import pytest


@pytest.fixture
def zero_bytes() -> bytes:
    """1024 bytes of 0x00."""
    return b"\x00" * 1024


@pytest.fixture
def cycling_bytes() -> bytes:
    """512 bytes cycling 0..255 twice; every 256-byte block holds each value once."""
    return bytes(i % 256 for i in range(512))


@pytest.fixture
def random_bytes() -> bytes:
    return os.urandom(65536)


@pytest.fixture
def text_bytes() -> bytes:
    return b"The quick brown fox jumps over the lazy dog. " * 100


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from inside *tmp_path* so short relative names work."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
