"""
CensusMap - Boundary Archive Cache.

Remote boundary archives are fetched once into the cache directory and
unpacked next to it. Later runs read the local copies.
"""

from __future__ import annotations

import hashlib
import shutil
import zipfile
from pathlib import Path
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from censusmap.core.errors import SourceLoadError
from censusmap.settings import get_cache_dir, logger

# Written last by extract_archive; a directory without it is a partial unpack
EXTRACTED_MARKER = ".extracted"

CHUNK_SIZE = 1 << 16


def cache_key(url: str, *, suffix: str = "") -> str:
    """Stable cache file name for a URL."""
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:32]
    return digest + suffix


def _retrying_session(attempts: int = 3, backoff: float = 0.5) -> requests.Session:
    """Session that retries throttled and transient-failure GETs."""
    policy = Retry(
        total=attempts,
        connect=attempts,
        read=attempts,
        backoff_factor=backoff,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD"}),
        respect_retry_after_header=True,
    )
    session = requests.Session()
    for prefix in ("http://", "https://"):
        session.mount(prefix, HTTPAdapter(max_retries=policy))
    return session


def _stream_to(response: requests.Response, target: Path) -> int:
    written = 0
    with open(target, "wb") as fh:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                written += fh.write(chunk)
    return written


def fetch_to_cache(
    url: str,
    *,
    relpath: Path,
    timeout: int = 180,
    refresh: bool = False,
) -> Path:
    """
    Returns the cached copy of `url`, downloading it first if needed.

    The body goes to a '.part' sibling and is renamed into place only once
    complete.

    Raises:
        SourceLoadError: on HTTP errors, network failures or disk errors.
    """
    target = get_cache_dir() / relpath
    if target.is_file() and not refresh:
        logger.info(f"    ♻️  Using cached archive: {target.name}")
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")

    logger.info(f"    ⬇️  Downloading: {url}")
    try:
        with _retrying_session().get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            size = _stream_to(response, partial)
        partial.replace(target)
    except (requests.RequestException, OSError) as e:
        partial.unlink(missing_ok=True)
        raise SourceLoadError(f"Failed to download {url}: {e}") from e

    logger.info(f"    ✅ Saved {size / 1e6:.1f} MB to cache.")
    return target


def _member_target(root: Path, name: str) -> Path:
    target = (root / name).resolve()
    if not target.is_relative_to(root):
        raise SourceLoadError(f"Archive member escapes extraction dir: {name}")
    return target


def extract_archive(
    archive: Path,
    *,
    dest: Path,
    refresh: bool = False,
) -> Path:
    """
    Unpacks `archive` into `dest` and returns `dest`.

    Every member path is checked before anything is written, so an archive
    with a member outside `dest` leaves no files behind.
    """
    marker = dest / EXTRACTED_MARKER
    if marker.exists() and not refresh:
        return dest

    root = dest.resolve()
    logger.info(f"    📦 Extracting: {archive.name}")

    try:
        with zipfile.ZipFile(archive) as zf:
            members = [(info, _member_target(root, info.filename)) for info in zf.infolist()]
            dest.mkdir(parents=True, exist_ok=True)
            for info, target in members:
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)
    except zipfile.BadZipFile as e:
        raise SourceLoadError(f"Not a valid zip archive: {archive}") from e

    marker.touch()
    return dest


def first_match(root: Path, pattern: str) -> Optional[Path]:
    """First path under `root` matching `pattern`, in sorted order."""
    for path in sorted(root.rglob(pattern)):
        if path.is_file():
            return path
    return None
