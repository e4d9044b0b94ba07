"""Records produced by the extraction core and their JSON shapes."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class FeedInfo:
    title: str = ""
    description: str = ""

    def to_dict(self) -> Dict:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True)
class PostRecord:
    """One validated feed item; optional fields are omitted from the JSON form."""

    title: str
    url: Optional[str] = None
    content: Optional[str] = None
    published_at: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {"title": self.title}
        if self.url:
            data["url"] = self.url
        if self.content:
            data["content"] = self.content
        if self.published_at:
            data["publishedAt"] = self.published_at
        return data


@dataclass(frozen=True)
class ParsedFeed:
    feed_info: FeedInfo
    posts: Tuple[PostRecord, ...] = ()


@dataclass(frozen=True)
class ImageCandidate:
    url: str
    width: int = 0
    dpr: Optional[float] = None


@dataclass(frozen=True)
class SubstackProfile:
    author: str
    posts: Tuple[str, ...]
    category: str
    rss_url: str
    substack_url: str
    total_posts: int
    articles: Tuple[PostRecord, ...] = ()
    about_url: Optional[str] = None
    social_urls: Tuple[str, ...] = ()
    description: str = ""
    profile_image_url: Optional[str] = None
    variables: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view over a private copy of the caller's mapping.
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    def to_dict(self) -> Dict:
        data = {
            "author": self.author,
            "posts": list(self.posts),
            "articles": [a.to_dict() for a in self.articles],
            "category": self.category,
            "rssUrl": self.rss_url,
            "substackUrl": self.substack_url,
            "totalPosts": self.total_posts,
            "socialUrls": list(self.social_urls),
            "description": self.description,
            "variables": dict(self.variables),
        }
        if self.about_url:
            data["aboutUrl"] = self.about_url
        if self.profile_image_url:
            data["profileImageUrl"] = self.profile_image_url
        return data


@dataclass(frozen=True)
class ExtractionResult:
    success: bool
    data: Optional[SubstackProfile]
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return not self.success and self.data is None

    def to_dict(self) -> Dict:
        out = {
            "success": self.success,
            "data": self.data.to_dict() if self.data is not None else None,
        }
        if self.error:
            out["error"] = self.error
        if self.message:
            out["message"] = self.message
        return out
