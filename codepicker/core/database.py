"""
Merging of download results into the dedup database.
"""

from typing import Iterable

from ..models import Database, DownloadRecord


def merge_databases(database: Database, records: Iterable[DownloadRecord]) -> Database:
    """
    Combine ``records`` with an existing database, keyed by content hash.

    A record for a hash already in the database replaces the old one.
    The input database is left untouched.
    """
    merged: Database = dict(database)
    for record in records:
        merged[record.sha] = record
    return merged
