class BlockIndex:
    """Digest -> block map backing O(1) lookups.

    Not synchronized on its own; the owning Blockchain holds the lock.
    """

    def __init__(self):
        self._blocks = {}

    def put(self, digest, block):
        # last writer wins on a duplicate digest
        self._blocks[digest] = block

    def get(self, digest):
        return self._blocks.get(digest)

    def validate_event(self, claimed_digest, claimed_event) -> bool:
        block = self._blocks.get(claimed_digest)
        if block is None:
            return False
        return block.event == claimed_event

    def __contains__(self, digest):
        return digest in self._blocks

    def __len__(self):
        return len(self._blocks)
