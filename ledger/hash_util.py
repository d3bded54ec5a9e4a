import hashlib
from functools import partial

CHUNK_SIZE = 1 << 16


def canonical_record(block) -> str:
    # Field order and the absence of separators are part of the digest format
    return (
        f"{block.index}{block.timestamp}{block.file_hash}{block.event}"
        f"{block.event_time}{block.location}{block.server}{block.prev_hash}"
    )


def calculate_hash(block) -> str:
    """SHA-256 of the block's canonical record, as lowercase hex.

    ``block`` can be anything carrying the block attributes; its own ``hash``
    is never part of the record.
    """
    sha = hashlib.sha256()
    sha.update(canonical_record(block).encode("utf-8"))
    return sha.hexdigest()


def hash_file(filepath) -> str:
    """SHA-256 of a file's contents, read in CHUNK_SIZE pieces."""
    digest = hashlib.sha256()
    with open(filepath, "rb") as stream:
        for chunk in iter(partial(stream.read, CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
