"""Utility helpers shared across ingestion components."""

from __future__ import annotations

import hashlib
import mimetypes
from collections.abc import Sequence
from pathlib import Path

_DEFAULT_CHUNK_SIZE = 1024 * 1024


def guess_media_type(path: Path) -> str | None:
    media_type, _encoding = mimetypes.guess_type(path)
    return media_type


def sha256_path(path: Path, *, chunk_size: int = _DEFAULT_CHUNK_SIZE) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def normalize_suffixes(
    values: Sequence[str] | str | None,
    *,
    default: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Normalize file suffix tokens to lowercase dotted form.

    Returns ``default`` when the input is empty, otherwise the unique
    suffixes in first-appearance order.
    """

    if not values:
        iterator: Sequence[str] = ()
    elif isinstance(values, str):
        iterator = [values]
    else:
        iterator = values

    cleaned: list[str] = []
    for raw in iterator:
        token = str(raw).strip().lower()
        if not token:
            continue
        if not token.startswith("."):
            token = f".{token}"
        cleaned.append(token)

    if not cleaned:
        return tuple(default) if default is not None else ()
    return tuple(dict.fromkeys(cleaned))
