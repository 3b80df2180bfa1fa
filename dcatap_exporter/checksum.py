"""Dataverse checksum type -> SPDX checksum algorithm name."""

from __future__ import annotations

from typing import Optional


# Dataverse's supported algorithms spell SHA with a dash.
SPDX_CHECKSUM_ALGORITHMS = {
    "MD5": "checksumAlgorithm_md5",
    "SHA-1": "checksumAlgorithm_sha1",
    "SHA-224": "checksumAlgorithm_sha224",
    "SHA-256": "checksumAlgorithm_sha256",
    "SHA-512": "checksumAlgorithm_sha512",
}


def spdx_checksum_algorithm(checksum_type: Optional[str]) -> str:
    """Return the SPDX algorithm name, or '' when there is no mapping."""
    if not isinstance(checksum_type, str):
        return ""
    return SPDX_CHECKSUM_ALGORITHMS.get(checksum_type.strip().upper(), "")
