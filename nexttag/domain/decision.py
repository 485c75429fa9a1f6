"""
The outcome of a resolution run.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .bump import BumpLevel
from .tag import Tag


@dataclass(frozen=True)
class VersionDecision:
    """
    Next version for a branch, produced once per run.

    ``result`` is the bare version (no ``v`` prefix) or, for a custom tag,
    the literal tag requested. Custom decisions carry no version math, so
    their base version and level are left empty.

    Attributes:
        result: Next version string or custom tag literal
        base_version: Version the increment started from
        bump_level: Level applied on a release branch, NONE otherwise
        is_prerelease: True when the result is a pre-release
        channel: Pre-release label used, if any
        latest_tag: Latest applicable tag found for the branch
        custom: True when ``result`` is a custom tag override
    """

    result: str
    base_version: Optional[str] = None
    bump_level: BumpLevel = BumpLevel.NONE
    is_prerelease: bool = False
    channel: Optional[str] = None
    latest_tag: Optional[Tag] = None
    custom: bool = False

    @property
    def current_tag(self) -> str:
        """Latest tag name, ``0.0.0`` when the repository has none."""
        return self.latest_tag.name if self.latest_tag else "0.0.0"

    def tag_name(self, prefix: str = "") -> str:
        """Name of the tag to publish; custom tags are used verbatim."""
        if self.custom:
            return self.result
        return f"{prefix}{self.result}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'result': self.result,
            'base_version': self.base_version,
            'bump_level': self.bump_level.value,
            'is_prerelease': self.is_prerelease,
            'channel': self.channel,
            'latest_tag': self.latest_tag.name if self.latest_tag else None,
            'custom': self.custom,
        }
