"""Digests for Gerber checksums and file provenance.

Provides:
    - gerber_checksum(): MD5 over Gerber text with line breaks removed
      (the value of the ``%TF.MD5`` attribute)
    - verify_gerber_checksum(): re-derive the checksum of an assembled file
    - sha256_file(): hash written files for provenance logging

Checksum rule:
    Every ``\n`` is removed before hashing.
    The remaining text is encoded as UTF-8 and hashed with MD5;
    the digest is written as lowercase hex (32 chars).

Usage:
    from gerber_cam.utils import hashing
    digest = hashing.gerber_checksum(text_before_footer)
    assert hashing.verify_gerber_checksum(full_file_text)
"""

import hashlib
import re
from pathlib import Path
from typing import Union

_MD5_ATTRIBUTE = re.compile(r"^%TF\.MD5,([0-9a-f]{32})\*%$", re.MULTILINE)


def md5_string(s: str) -> str:
    """Compute MD5 hash of string (UTF-8).

    Parameters
    ----------
    s : str
        String to hash

    Returns
    -------
    str
        MD5 hex digest (32 characters)
    """
    md5 = hashlib.md5()
    md5.update(s.encode('utf-8'))
    return md5.hexdigest()


def gerber_checksum(text: str) -> str:
    """Checksum of Gerber text as written in the ``%TF.MD5`` attribute.

    Parameters
    ----------
    text : str
        Everything preceding the ``%TF.MD5`` line

    Returns
    -------
    str
        MD5 hex digest of *text* with every ``\\n`` removed
    """
    return md5_string(text.replace("\n", ""))


def verify_gerber_checksum(gerber_text: str) -> bool:
    """Check the ``%TF.MD5`` attribute of a complete Gerber file.

    Parameters
    ----------
    gerber_text : str
        Full file content including the footer

    Returns
    -------
    bool
        True if the attribute matches the preceding content, False if it
        differs or is missing

    Examples
    --------
    >>> text = generator.generate()
    >>> verify_gerber_checksum(text)
    True
    """
    match = _MD5_ATTRIBUTE.search(gerber_text)
    if match is None:
        return False
    return gerber_checksum(gerber_text[:match.start()]) == match.group(1)


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 hash of file contents.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    chunk_size : int
        Read chunk size in bytes, default 1 MB

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()

    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            sha256.update(chunk)

    return sha256.hexdigest()
