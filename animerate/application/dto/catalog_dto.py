"""Data Transfer Objects for catalog provider results."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CatalogAnime:
    """Read-only snapshot of one catalog entry."""
    id: int
    title: str
    image_url: str
    type: Optional[str] = None
    episodes: Optional[int] = None
    year: Optional[int] = None
    score: Optional[float] = None
    synopsis: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    studios: List[str] = field(default_factory=list)


@dataclass
class CatalogSearchPage:
    """One page of catalog search results."""
    results: List[CatalogAnime]
    last_visible_page: int = 1
    has_next_page: bool = False
