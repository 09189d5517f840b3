"""
Provider response parsers.

Each parser turns one provider response body into the canonical
Metadata triple. Parsers are registered by shape name in PARSERS and
bound to a provider when the provider list is built.

Dependencies: bs4, json
System role: Normalization of heterogeneous metadata responses
"""

import json
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup


@dataclass
class Metadata:
    """Page metadata triple; every field is optional."""

    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None

    def __post_init__(self) -> None:
        self.title = _clean(self.title)
        self.description = _clean(self.description)
        self.thumbnail = _clean(self.thumbnail)

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.description or self.thumbnail)


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _image_url(image: Any) -> Any:
    # Image may be a bare string or an object such as {"url": "..."}
    if isinstance(image, dict):
        return image.get("url")
    return image


def target_origin(target_url: str) -> str:
    """Return scheme://host/ of the target, used as base for relative images."""
    parts = urlsplit(target_url)
    return f"{parts.scheme}://{parts.netloc}/"


def parse_envelope_json(body: str, target_url: str) -> Metadata:
    """Parse {"data": {"title", "description", "image"}} responses."""
    payload = json.loads(body)
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        return Metadata()
    return Metadata(
        title=data.get("title"),
        description=data.get("description"),
        thumbnail=_image_url(data.get("image")),
    )


def parse_flat_json(body: str, target_url: str) -> Metadata:
    """Parse top-level {"title", "description", "image" | "images"} responses."""
    payload = json.loads(body)
    if not isinstance(payload, dict):
        return Metadata()

    image = _image_url(payload.get("image"))
    if not image:
        images = payload.get("images")
        if isinstance(images, list) and images:
            image = _image_url(images[0])

    return Metadata(
        title=payload.get("title"),
        description=payload.get("description"),
        thumbnail=image,
    )


def _meta_content(soup: BeautifulSoup, key: str) -> str | None:
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    if tag is None:
        return None
    return tag.get("content")


def parse_html(body: str, target_url: str) -> Metadata:
    """
    Parse a raw HTML page.

    Open Graph tags win; <title> and meta[name=description] are fallbacks.
    Relative og:image values are resolved against the target's origin.
    """
    soup = BeautifulSoup(body, "html.parser")

    title = _clean(_meta_content(soup, "og:title"))
    if not title and soup.title is not None:
        title = soup.title.get_text()

    description = _clean(_meta_content(soup, "og:description"))
    if not description:
        tag = soup.find("meta", attrs={"name": "description"})
        description = tag.get("content") if tag is not None else None

    image = _clean(_meta_content(soup, "og:image"))
    if image:
        image = urljoin(target_origin(target_url), image)

    return Metadata(title=title, description=description, thumbnail=image)


Parser = Callable[[str, str], Metadata]

PARSERS: dict[str, Parser] = {
    "envelope_json": parse_envelope_json,
    "flat_json": parse_flat_json,
    "html": parse_html,
}
