"""
Semantic version policy for nexttag.

Pure functions over version strings, backed by the ``semver`` package:
- clean: strip an optional ``v``/``=`` prefix and validate strict semver
- compare: semver precedence (build metadata ignored)
- is_prerelease: does the version carry a pre-release component
- increment: bump major/minor/patch, or advance a labelled pre-release

Examples:
    clean("v1.2.3")                          -> Version(1, 2, 3)
    clean("release-1")                       -> None
    increment("1.2.0", "prerelease", "beta") -> "1.2.1-beta.0"
    increment("1.1.0-beta.0", "prerelease", "beta") -> "1.1.0-beta.1"
"""

import re
from typing import Optional, Union

import semver

from ..exit_codes import InvalidVersionError
from .bump import BumpLevel

VersionLike = Union[str, semver.Version]

PRERELEASE = "prerelease"
ZERO = semver.Version(0, 0, 0)

_PREFIX = re.compile(r'^[=v]+')
_NUMERIC = re.compile(r'^\d+$')


def clean(raw: Optional[VersionLike]) -> Optional[semver.Version]:
    """
    Parse a tag name or version string into a Version.

    Args:
        raw: Version string, optionally prefixed (``v1.2.3``, ``=1.2.3``)

    Returns:
        Parsed Version, or None if ``raw`` is not a semantic version
    """
    if raw is None:
        return None
    if isinstance(raw, semver.Version):
        return raw

    candidate = _PREFIX.sub('', str(raw).strip())
    try:
        return semver.Version.parse(candidate)
    except (ValueError, TypeError):
        return None


def parse(raw: VersionLike) -> semver.Version:
    """Like clean(), but raise InvalidVersionError instead of returning None."""
    version = clean(raw)
    if version is None:
        raise InvalidVersionError(str(raw))
    return version


def compare(a: VersionLike, b: VersionLike) -> int:
    """Compare two versions by semver precedence; returns -1, 0 or 1."""
    return parse(a).compare(parse(b))


def is_prerelease(version: VersionLike) -> bool:
    """True iff the version has a pre-release component."""
    return parse(version).prerelease is not None


def increment(
    version: VersionLike,
    level: Union[str, BumpLevel],
    prerelease_label: Optional[str] = None
) -> semver.Version:
    """
    Compute the version after a bump.

    Args:
        version: Current version
        level: ``major``, ``minor``, ``patch`` or ``prerelease``
        prerelease_label: Channel name for ``prerelease`` increments

    Returns:
        The incremented Version

    Raises:
        InvalidVersionError: If the version does not parse, the level is
            unknown, or the label yields an invalid pre-release
    """
    current = parse(version)
    name = level.value if isinstance(level, BumpLevel) else str(level).strip().lower()

    if name == BumpLevel.MAJOR.value:
        return current.bump_major()
    if name == BumpLevel.MINOR.value:
        return current.bump_minor()
    if name == BumpLevel.PATCH.value:
        return current.bump_patch()
    if name == PRERELEASE:
        return _next_prerelease(current, prerelease_label)

    raise InvalidVersionError(str(current), f"cannot increment by {level!r}")


def _next_prerelease(current: semver.Version, label: Optional[str]) -> semver.Version:
    """Advance or start a pre-release series scoped to ``label``."""
    label = label.strip() if label else None

    if current.prerelease is None:
        core = current.bump_patch()
        identifiers = [label, '0'] if label else ['0']
    else:
        core = current.replace(prerelease=None, build=None)
        identifiers = current.prerelease.split('.')
        for i in range(len(identifiers) - 1, -1, -1):
            if _NUMERIC.match(identifiers[i]):
                identifiers[i] = str(int(identifiers[i]) + 1)
                break
        else:
            identifiers.append('0')

        if label:
            same_series = (
                identifiers[0] == label
                and len(identifiers) > 1
                and _NUMERIC.match(identifiers[1]) is not None
            )
            if not same_series:
                identifiers = [label, '0']

    candidate = f"{core.major}.{core.minor}.{core.patch}-{'.'.join(identifiers)}"
    try:
        return semver.Version.parse(candidate)
    except ValueError:
        raise InvalidVersionError(
            candidate, f"pre-release label {label!r} is not a valid identifier"
        ) from None
