"""
Playability Filter

Decides which videos can be embedded publicly for the target region.

Two passes:
1. Strict: public + embeddable + region eligible + not members-only
2. Relaxed: same, minus the members-only text heuristic. Only used when the
   strict pass is short of the threshold and the relaxed pass reaches it.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from ..core.logging import get_logger
from ..models.youtube import VideoMetadata

logger = get_logger(__name__)

RESTRICTED_ACCESS_MARKERS = (
    "member",
    "members-only",
    "members only",
    "only for members",
)


@dataclass
class FilterResult:
    """Outcome of filtering one playlist's videos."""
    episodes: List[VideoMetadata] = field(default_factory=list)
    relaxed: bool = False
    strict_count: int = 0
    candidate_count: int = 0


def is_likely_members_only(video: VideoMetadata) -> bool:
    """Text heuristic for channel-membership videos."""
    text = f"{video.title} {video.description}".lower()
    return any(marker in text for marker in RESTRICTED_ACCESS_MARKERS)


class PlayabilityFilter:
    """
    Classifies videos as playable/unplayable for public embedding.

    Privacy, embeddable and region checks are never relaxed.
    """

    def __init__(self, target_region: str, min_playable: int = 3):
        self.target_region = target_region.upper()
        self.min_playable = min_playable

    def is_region_eligible(self, video: VideoMetadata) -> bool:
        if video.region_restriction is None:
            return True
        return video.region_restriction.is_eligible(self.target_region)

    def passes_mandatory_checks(self, video: VideoMetadata) -> bool:
        """Checks that hold in both passes."""
        return (
            video.privacy_status == "public"
            and video.embeddable
            and self.is_region_eligible(video)
        )

    def is_playable(self, video: VideoMetadata, strict: bool = True) -> bool:
        if not self.passes_mandatory_checks(video):
            return False
        if strict and is_likely_members_only(video):
            return False
        return True

    def apply(self, videos: Iterable[VideoMetadata]) -> FilterResult:
        """
        Filter candidates, keeping their order.

        Args:
            videos: Candidate metadata in playlist order

        Returns:
            FilterResult with the chosen episodes and whether relaxation
            was used
        """
        candidates = list(videos)
        strict = [v for v in candidates if self.is_playable(v, strict=True)]
        result = FilterResult(
            episodes=strict,
            strict_count=len(strict),
            candidate_count=len(candidates),
        )

        if len(strict) >= self.min_playable:
            return result

        relaxed = [v for v in candidates if self.is_playable(v, strict=False)]
        if len(relaxed) >= self.min_playable:
            logger.warning(
                "playability_relaxed",
                strict=len(strict),
                relaxed=len(relaxed),
                candidates=len(candidates),
            )
            result.episodes = relaxed
            result.relaxed = True

        return result
