"""Rating category catalog loaded from a JSON file."""
import json
import logging
from pathlib import Path
from typing import List

from animerate.constants import CATEGORIES_DOCUMENT_KEY, DEFAULT_RATING_CATEGORIES
from animerate.core.exceptions import ValidationError
from animerate.domain.entities.anime_rating import RatingCategoryBase

logger = logging.getLogger(__name__)


def default_categories() -> List[RatingCategoryBase]:
    """Built-in catalog used when the file cannot be read."""
    return [RatingCategoryBase.from_dict(item) for item in DEFAULT_RATING_CATEGORIES]


class JsonCategoryCatalog:
    """Reads ``{"categories": [{id, name, description}, ...]}``.

    The file is external configuration; it is re-read on every call so edits
    show up without a restart. Missing or malformed files fall back to the
    built-in categories.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)

    def load(self) -> List[RatingCategoryBase]:
        if not self.file_path.exists():
            logger.warning(f"Categories file not found at {self.file_path}, using defaults")
            return default_categories()

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read categories file {self.file_path}: {e}")
            return default_categories()

        items = data.get(CATEGORIES_DOCUMENT_KEY) if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.error(f"Invalid categories format in {self.file_path}")
            return default_categories()

        try:
            categories = [RatingCategoryBase.from_dict(item) for item in items]
        except ValidationError as e:
            logger.error(f"Invalid category in {self.file_path}: {e.message}")
            return default_categories()

        logger.debug(f"Loaded {len(categories)} rating categories")
        return categories
