"""Video reference resolution.

Turns the opaque ``video_url`` stored on a Video into something the player can
embed. Classification is purely syntactic: nothing here checks that the remote
video exists. URLs that match no provider resolve to ``None``, which callers
render as "no player available".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class VideoProvider(str, Enum):
    """Third-party hosts we can embed."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"


_EMBED_URL_TEMPLATES: dict[VideoProvider, str] = {
    VideoProvider.YOUTUBE: "https://www.youtube.com/embed/{video_id}",
    VideoProvider.VIMEO: "https://player.vimeo.com/video/{video_id}",
}


@dataclass(frozen=True, slots=True)
class EmbedRef:
    """A playable reference: provider plus the provider's own video id."""

    provider: VideoProvider
    video_id: str

    @property
    def embed_url(self) -> str:
        return _EMBED_URL_TEMPLATES[self.provider].format(video_id=self.video_id)


# Order matters: the first provider whose pattern matches wins.
_PATTERNS: tuple[tuple[VideoProvider, re.Pattern[str]], ...] = (
    (
        VideoProvider.YOUTUBE,
        re.compile(r"(?:youtu\.be/|youtube\.com/(?:embed/|v/|watch\?v=))([A-Za-z0-9_-]{11})"),
    ),
    (
        VideoProvider.VIMEO,
        re.compile(r"vimeo\.com/(\d+)"),
    ),
)


def resolve(url: str | None) -> EmbedRef | None:
    """Classify ``url`` as a YouTube or Vimeo embed, or None when unsupported."""
    if not url:
        return None
    for provider, pattern in _PATTERNS:
        match = pattern.search(url)
        if match:
            return EmbedRef(provider=provider, video_id=match.group(1))
    return None
