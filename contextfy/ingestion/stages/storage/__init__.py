"""Record persistence: JSON records committed through a staging directory."""

from .records import Record, decode_record, encode_record, records_for
from .staging import STAGING_PREFIX, StagedCommit, recover_staging
from .store import KnowledgeStore, open_store

__all__ = [
    "Record",
    "encode_record",
    "decode_record",
    "records_for",
    "STAGING_PREFIX",
    "StagedCommit",
    "recover_staging",
    "KnowledgeStore",
    "open_store",
]
