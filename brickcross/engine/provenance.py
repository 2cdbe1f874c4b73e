"""Run provenance: git state of the code and a fingerprint of the input data."""

from __future__ import annotations

import hashlib
import logging
import subprocess
from pathlib import Path

log = logging.getLogger(__name__)


def _git(repo: Path, *args: str) -> str:
    return (
        subprocess.check_output(["git", *args], cwd=repo, stderr=subprocess.DEVNULL)
        .decode()
        .strip()
    )


def get_git_info(repo: Path) -> dict:
    """Return ``git_commit`` (HEAD SHA or ``"unknown"``) and ``git_dirty``."""
    try:
        return {
            "git_commit": _git(repo, "rev-parse", "HEAD"),
            "git_dirty": bool(_git(repo, "status", "--porcelain")),
        }
    except (subprocess.CalledProcessError, FileNotFoundError, NotADirectoryError):
        log.warning("Could not read git info for %s; recording 'unknown'", repo)
        return {"git_commit": "unknown", "git_dirty": False}


def data_ref(source: str, files: list[Path], row_count: int) -> dict:
    """Describe the input files by name and size, plus a SHA-256 of that listing.

    The hash changes whenever a file is added, removed, renamed or resized,
    and is stable across machines for the same snapshot.
    """
    entries = []
    hash_parts = []
    for path in files:
        size = path.stat().st_size
        entries.append({"name": path.name, "size_bytes": size})
        hash_parts.append(f"{path.name}:{size}")

    digest = hashlib.sha256("|".join(hash_parts).encode("utf-8")).hexdigest()
    return {
        "source": source,
        "row_count": row_count,
        "files": entries,
        "files_hash_sha256": digest,
    }
