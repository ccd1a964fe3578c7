"""
Listing Store for the nearby search.

Stands in for the record store the search endpoint reads from: an ordered
collection of listing records held in a pandas DataFrame, with the one read
operation search needs, `find`, which applies equality filters on `status`
and `type` and an all-of membership filter on `facilities`.

Records come back as copies of the dicts the store was loaded with, in store-native
order; the frame only decides which ones match. CSV rows leave out cells that
are empty for that row.
"""

import ast
import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

from ..utils.logger import logger

SUPPORTED_FORMATS = ('json', 'csv')

# Columns that CSV exports flatten to their Python/JSON repr
STRUCTURED_COLUMNS = ('geo', 'facilities', 'images')


class ListingStoreError(Exception):
    """The record store could not be read."""


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _parse_structured(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return ast.literal_eval(value)
    except (ValueError, SyntaxError):
        return value


class ListingStore:
    """Class for loading listing records and reading them back with filters."""

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        """
        Initialize the listing store.

        Args:
            records: Listing dicts, kept in the given order.
        """
        self._records = list(records or [])
        self.listings_df = pd.DataFrame(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_file(cls, file_path: Union[str, Path], file_format: Optional[str] = None) -> "ListingStore":
        """
        Load listings from a JSON (array of objects) or CSV file.

        Args:
            file_path: Path to the data file
            file_format: 'json' or 'csv'. If None, inferred from the file extension.

        Returns:
            A populated ListingStore

        Raises:
            ListingStoreError: If the file is missing, unreadable, or of an unsupported format.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ListingStoreError(f"File not found at {file_path}")

        if file_format is None:
            file_format = file_path.suffix.lower().lstrip('.')
        if file_format not in SUPPORTED_FORMATS:
            raise ListingStoreError(f"Unsupported file format: {file_format}")

        try:
            if file_format == 'json':
                with open(file_path, 'r') as f:
                    records = json.load(f)
                if not isinstance(records, list):
                    raise ListingStoreError(f"Expected a JSON array of listings in {file_path}")
                store = cls(records)
            else:
                df = pd.read_csv(file_path)
                for column in STRUCTURED_COLUMNS:
                    if column in df.columns:
                        df[column] = df[column].apply(_parse_structured)
                records = [
                    {key: value for key, value in row.items() if not _is_missing(value)}
                    for row in df.astype(object).to_dict('records')
                ]
                store = cls(records)
        except ListingStoreError:
            raise
        except (OSError, ValueError, pd.errors.ParserError) as e:
            raise ListingStoreError(f"Error loading listing data from {file_path}: {e}") from e

        logger.info(f"Loaded {len(store)} listings from {file_path}", extra={
            "operation": "load_listings",
            "file_format": file_format,
            "listing_count": len(store)
        })
        return store

    def find(
            self,
            status: Optional[str] = None,
            type_: Optional[str] = None,
            facilities: Optional[List[str]] = None,
            ) -> List[Dict[str, Any]]:
        """
        Return listings matching every given filter, in store order.

        Args:
            status: Exact listing status (e.g. "active")
            type_: Exact listing type (e.g. "1 BHK")
            facilities: Facilities every returned listing must offer

        Returns:
            List of listing dicts
        """
        df = self.listings_df
        if not self._records:
            return []

        mask = pd.Series(True, index=df.index)
        for column, wanted_value in (('status', status), ('type', type_)):
            if not wanted_value:
                continue
            if column not in df.columns:
                return []
            mask &= df[column] == wanted_value

        if facilities:
            if 'facilities' not in df.columns:
                return []
            wanted = set(facilities)
            mask &= df['facilities'].apply(
                lambda offered: isinstance(offered, (list, tuple, set)) and wanted.issubset(offered)
            ).astype(bool)

        return [dict(record) for record, keep in zip(self._records, mask) if keep]
