"""Adapters - I/O implementations of ports."""

from .markdown_vault import MarkdownVault, VaultStats
from .block_ids import BlockIdWriter
from .json_acks import JsonAcknowledgementStore

__all__ = [
    "MarkdownVault",
    "VaultStats",
    "BlockIdWriter",
    "JsonAcknowledgementStore",
]
