"""Evidence content classification.

Decides how a piece of evidence is shown on the public timeline: stored embed
markup, an embedded YouTube player, or a plain external link.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

# Matches the last YouTube path/query marker and captures what follows it
YOUTUBE_PATTERN = re.compile(r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
YOUTUBE_ID_LENGTH = 11
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"

LINK_DISPLAY_MAX = 60


@dataclass(frozen=True)
class Embed:
    """Stored markup rendered as-is. Only verified rows ever reach the renderer."""

    markup: str


@dataclass(frozen=True)
class Video:
    video_id: str

    @property
    def embed_url(self) -> str:
        return youtube_embed_url(self.video_id)


@dataclass(frozen=True)
class Link:
    url: str

    @property
    def display(self) -> str:
        """URL shortened for display."""
        if len(self.url) <= LINK_DISPLAY_MAX:
            return self.url
        return self.url[:LINK_DISPLAY_MAX] + "…"


Content = Union[Embed, Video, Link]


def youtube_id(content: str) -> Optional[str]:
    """Extract an 11-character YouTube video id, or None."""
    match = YOUTUBE_PATTERN.match(content or "")
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return match.group(2)
    return None


def youtube_embed_url(video_id: str) -> str:
    return f"{YOUTUBE_EMBED_BASE}{video_id}"


def classify(content: str, type_tag: str) -> Content:
    """
    Classify evidence content for rendering.

    Precedence: an ``iframe`` type tag always embeds the stored markup;
    otherwise a detectable YouTube id gives a video; anything else is a link.

    Args:
        content: The stored content_url value
        type_tag: The stored evidence type

    Returns:
        Embed, Video or Link
    """
    if type_tag == "iframe":
        return Embed(markup=content)

    video_id = youtube_id(content)
    if video_id:
        return Video(video_id=video_id)

    return Link(url=content)
