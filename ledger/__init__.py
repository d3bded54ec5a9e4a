from ledger.blockchain import Blockchain, LedgerError, generate_block
from ledger.hash_util import calculate_hash, canonical_record, hash_file
from ledger.index import BlockIndex

__all__ = [
    "Blockchain",
    "BlockIndex",
    "LedgerError",
    "calculate_hash",
    "canonical_record",
    "generate_block",
    "hash_file",
]
