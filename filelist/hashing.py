import hashlib

DEFAULT_CHUNK_SIZE = 1 << 20


def sha256_hex(path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """SHA-256 of the whole file as 64 uppercase hex characters.

    Raises OSError when the file cannot be read, ValueError for a non-positive chunk_size.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest().upper()
