import dataclasses
import datetime
import logging
import threading

from models import Block
from ledger.hash_util import calculate_hash
from ledger.index import BlockIndex

logger = logging.getLogger(__name__)


class LedgerError(RuntimeError):
    pass


def _now():
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def generate_block(old_block, file_hash, event, event_time, location, server, timestamp):
    """Create the block that follows ``old_block``, hash included."""
    new_block = Block(
        index=old_block.index + 1,
        timestamp=timestamp,
        file_hash=file_hash,
        event=event,
        event_time=event_time,
        location=location,
        server=server,
        prev_hash=old_block.hash,
    )
    return dataclasses.replace(new_block, hash=calculate_hash(new_block))


class Blockchain:
    """Append-only, hash-chained ledger of audit events.

    Keeps the chain and a digest index side by side. Every mutation and every
    read goes through ``_lock``, so the two never disagree for an observer.
    Only blocks that made it onto the chain are indexed.
    """

    def __init__(self, clock=None):
        self.chain = []
        self.index = BlockIndex()
        self._lock = threading.Lock()
        self._clock = clock or _now
        self.init_genesis()

    def init_genesis(self):
        with self._lock:
            if self.chain:
                raise LedgerError("Genesis block already exists")
            genesis = Block(
                index=0,
                timestamp=self._clock(),
                file_hash="",
                event="",
                event_time="",
                location="",
                server="",
                prev_hash="",
            )
            genesis = dataclasses.replace(genesis, hash=calculate_hash(genesis))
            # no predecessor to validate against
            self.chain.append(genesis)
            self.index.put(genesis.hash, genesis)
        logger.info("Created genesis block %s", genesis.hash)
        return genesis

    @property
    def tip(self):
        with self._lock:
            return self.chain[-1]

    def append(self, event, event_time="", file_hash="", location="", server=""):
        """Build, validate and append a block for one event.

        Returns ``(block, ok)``. An empty event gives ``(None, False)``; a
        candidate failing validation is returned unappended with ``False``.
        """
        if not event:
            logger.warning("Rejected block with empty event")
            return None, False

        with self._lock:
            tip = self.chain[-1]
            candidate = generate_block(
                tip, file_hash, event, event_time, location, server, self._clock()
            )
            if not self.is_valid(candidate, tip):
                logger.error(
                    "Chain invariant violated: candidate %s does not follow tip %s",
                    candidate.index,
                    tip.index,
                )
                return candidate, False
            self.chain.append(candidate)
            self.index.put(candidate.hash, candidate)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Chain: %r", self.chain)

        logger.info("Appended block %s (%s) %s", candidate.index, candidate.event, candidate.hash)
        return candidate, True

    @staticmethod
    def is_valid(new_block, old_block) -> bool:
        if old_block.index + 1 != new_block.index:
            return False
        if old_block.hash != new_block.prev_hash:
            return False
        if calculate_hash(new_block) != new_block.hash:
            return False
        return True

    def snapshot(self):
        with self._lock:
            return tuple(self.chain)

    def get(self, digest):
        with self._lock:
            return self.index.get(digest)

    def validate_event(self, claimed_digest, claimed_event) -> bool:
        with self._lock:
            return self.index.validate_event(claimed_digest, claimed_event)

    def verify(self) -> bool:
        """Re-check the whole chain, genesis included."""
        chain = self.snapshot()
        if not chain:
            return False
        genesis = chain[0]
        if genesis.index != 0 or genesis.prev_hash != "" or calculate_hash(genesis) != genesis.hash:
            return False
        return all(self.is_valid(block, prev) for prev, block in zip(chain, chain[1:]))

    def __len__(self):
        with self._lock:
            return len(self.chain)
