"""Load price-tagged listings from a delimited file."""

from pathlib import Path
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd

from ..abstractions.types import Listing
from ..exceptions import InputFileError, ParseError
from ..infrastructure.logging import get_logger

logger = get_logger(__name__)


class ListingLoader:
    """
    Parse a listings table into cleaned (price, longitude, latitude) records.

    Rows with a non-positive or unparseable price, or a latitude/longitude
    that is zero or unparseable, are skipped without raising.
    """

    def __init__(self,
                 price_column: str = 'price',
                 latitude_column: str = 'latitude',
                 longitude_column: str = 'longitude',
                 price_strip_pattern: str = r'[$€£,\s]'):
        self.price_column = price_column
        self.latitude_column = latitude_column
        self.longitude_column = longitude_column
        self.price_strip_pattern = price_strip_pattern

    @classmethod
    def from_config(cls, config: Any) -> 'ListingLoader':
        """Build a loader from ``listings.*`` settings."""
        return cls(
            price_column=config.get('listings.price_column', 'price'),
            latitude_column=config.get('listings.latitude_column', 'latitude'),
            longitude_column=config.get('listings.longitude_column', 'longitude'),
            price_strip_pattern=config.get('listings.price_strip_pattern', r'[$€£,\s]')
        )

    @property
    def required_columns(self) -> List[str]:
        return [self.price_column, self.latitude_column, self.longitude_column]

    def load(self, path: Union[str, Path]) -> List[Listing]:
        """
        Read listings from a CSV file with a header row.

        Args:
            path: Path to the listings file

        Returns:
            Valid listings in file order

        Raises:
            InputFileError: If the file is missing or unreadable
            ParseError: If the file cannot be parsed or lacks required columns
        """
        path = Path(path)
        logger.info(f"Loading listings from {path}...")

        # Rows with more fields than the header are dropped and counted as skipped
        overlong_rows = []
        try:
            df = pd.read_csv(
                path,
                dtype=str,
                keep_default_na=False,
                index_col=False,
                engine='python',
                on_bad_lines=overlong_rows.append
            )
        except FileNotFoundError as e:
            raise InputFileError(f"Listings file not found: {path}", e)
        except pd.errors.EmptyDataError as e:
            raise ParseError(f"Listings file is empty: {path}", e)
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise ParseError(f"Malformed listings file {path}: {e}", e)
        except OSError as e:
            raise InputFileError(f"Cannot read listings file {path}: {e}", e)

        listings = self.parse(df)
        rejected = len(df) - len(listings) + len(overlong_rows)
        logger.info(f"Loaded {len(listings)} valid listings ({rejected} rows skipped)")
        return listings

    def parse(self, df: pd.DataFrame) -> List[Listing]:
        """Clean and validate a frame of string columns."""
        missing = [column for column in self.required_columns if column not in df.columns]
        if missing:
            raise ParseError(f"Listings file is missing required columns: {', '.join(missing)}")

        prices = self._to_number(
            df[self.price_column].astype(str).str.replace(self.price_strip_pattern, '', regex=True)
        )
        latitudes = self._to_number(df[self.latitude_column].astype(str).str.strip())
        longitudes = self._to_number(df[self.longitude_column].astype(str).str.strip())

        # Zero coordinates mark missing locations
        valid = (
            np.isfinite(prices) & (prices > 0) &
            np.isfinite(latitudes) & (latitudes != 0) &
            np.isfinite(longitudes) & (longitudes != 0)
        )

        return [
            Listing(price=float(price), longitude=float(lon), latitude=float(lat))
            for price, lon, lat in zip(prices[valid], longitudes[valid], latitudes[valid])
        ]

    @staticmethod
    def _to_number(values: pd.Series) -> np.ndarray:
        return pd.to_numeric(values, errors='coerce').to_numpy(dtype=float)


def load_listings(path: Union[str, Path], config: Optional[Any] = None) -> List[Listing]:
    """Convenience wrapper around :class:`ListingLoader`."""
    loader = ListingLoader.from_config(config) if config is not None else ListingLoader()
    return loader.load(path)
