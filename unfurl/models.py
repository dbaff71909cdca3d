"""
Normalized preview metadata.

Metadata is a discriminated union of two frozen dataclasses keyed by their
`type` field. Records are built once by an extractor, handed to the
formatter and discarded.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

METADATA_TYPE_OGP = "ogp"
METADATA_TYPE_SOCIAL = "social"


@dataclass(frozen=True)
class OgpMetadata:
    """Metadata read from a page's Open Graph tags."""

    url: str
    title: Optional[str] = None
    site_name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    type: str = field(default=METADATA_TYPE_OGP, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'url': self.url,
            'title': self.title,
            'siteName': self.site_name,
            'imageUrl': self.image_url,
            'description': self.description,
        }


@dataclass(frozen=True)
class SocialMetadata:
    """Metadata read from a social platform's oEmbed response."""

    url: str
    site_name: str
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    body_text: Optional[str] = None
    photo_url: Optional[str] = None
    type: str = field(default=METADATA_TYPE_SOCIAL, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'url': self.url,
            'siteName': self.site_name,
            'authorName': self.author_name,
            'authorUrl': self.author_url,
            'bodyText': self.body_text,
            'photoUrl': self.photo_url,
        }


Metadata = Union[OgpMetadata, SocialMetadata]


def metadata_from_dict(data: Dict[str, Any]) -> Metadata:
    """
    Rebuild a metadata record from its `to_dict()` form.

    Raises:
        ValueError: If the type tag is unknown or `url` is missing
    """
    kind = data.get('type')
    url = data.get('url')
    if not url:
        raise ValueError("metadata is missing 'url'")

    if kind == METADATA_TYPE_OGP:
        return OgpMetadata(
            url=url,
            title=data.get('title'),
            site_name=data.get('siteName'),
            image_url=data.get('imageUrl'),
            description=data.get('description'),
        )
    if kind == METADATA_TYPE_SOCIAL:
        return SocialMetadata(
            url=url,
            site_name=data.get('siteName') or "",
            author_name=data.get('authorName'),
            author_url=data.get('authorUrl'),
            body_text=data.get('bodyText'),
            photo_url=data.get('photoUrl'),
        )
    raise ValueError(f"Unknown metadata type: {kind!r}")
