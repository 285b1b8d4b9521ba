"""
Catalog providers for the gallery.
The gallery controller only sees the ordered ImageRecord sequence a provider returns,
never where it came from.
"""
import json
import logging
from pathlib import Path
from typing import List, Protocol, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from reveal_gallery.config import Settings
from reveal_gallery.schemas import ImageRecord

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"
GATEWAY_PREFIX = "/view-image/"

_records_adapter = TypeAdapter(List[ImageRecord])


class CatalogError(Exception):
    """Raised when a catalog cannot be loaded."""


class CatalogProvider(Protocol):
    def load(self) -> Sequence[ImageRecord]:
        ...


def _check_unique_ids(records: Sequence[ImageRecord]) -> None:
    seen = set()
    for record in records:
        if record.id in seen:
            raise CatalogError(f"Duplicate image id in catalog: {record.id}")
        seen.add(record.id)


class StaticCatalog:
    """In-memory catalog."""

    def __init__(self, records: Sequence[ImageRecord]):
        records = tuple(records)
        _check_unique_ids(records)
        self._records = records

    def load(self) -> Sequence[ImageRecord]:
        return self._records


class JsonFileCatalog:
    """
    Catalog read from a JSON file holding an array of records.

    Args:
        path: Location of the JSON file

    Raises:
        CatalogError: If the file is unreadable, malformed or has duplicate ids
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Sequence[ImageRecord]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot read catalog {self.path}: {e}") from e

        try:
            records = tuple(_records_adapter.validate_python(raw))
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog {self.path}: {e}") from e

        _check_unique_ids(records)
        logger.info(f"Loaded {len(records)} catalog records from {self.path}")
        return records


def load_catalog(settings: Settings) -> Sequence[ImageRecord]:
    """Load the catalog configured by CATALOG_PATH, or the packaged default."""
    path = settings.CATALOG_PATH or DEFAULT_CATALOG_PATH
    return JsonFileCatalog(path).load()


def resolve_src(record: ImageRecord, api_base_url: str) -> str:
    """Prefix gateway-relative image paths with the API base URL."""
    if record.src.startswith(GATEWAY_PREFIX):
        return f"{api_base_url.rstrip('/')}{record.src}"
    return record.src


def next_batch(records: Sequence[ImageRecord], start: int, size: int) -> Sequence[ImageRecord]:
    """Contiguous slice of at most `size` records beginning at offset `start`."""
    if start < 0 or size < 1:
        raise ValueError("start must be >= 0 and size >= 1")
    return records[start:start + size]
