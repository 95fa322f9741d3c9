from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class ContentSearchResult:
    stream_id: str
    media_type: str  # "movie" or "tv"
    title: str
    poster: Optional[str]
    release_year: Optional[int]

    def as_dict(self) -> dict:
        return asdict(self)
