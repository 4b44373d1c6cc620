"""Discover optional host configuration for the in-container tool.

Probes a fixed, ordered list of directories under the user's home.  Nothing
found is not an error: the container starts with its default settings.
"""

from __future__ import annotations

from pathlib import Path

from agentbox.context import SessionContext
from agentbox.types import ConfigCategory, ConfigDiscoveryResult

# (relative path, category).  Uncategorized locations are reported but not mounted.
CANDIDATE_PATHS: tuple[tuple[tuple[str, ...], ConfigCategory | None], ...] = (
    ((".local", "share", "opencode"), ConfigCategory.PRIMARY_SHARE),
    ((".config", "opencode"), ConfigCategory.PRIMARY_CONFIG),
    ((".shared", "opencode"), ConfigCategory.ALTERNATIVE),
    ((".opencode",), None),
    ((".local", "opencode"), None),
    ((".config", "opencode-ai"), None),
)


def find_tool_configs(ctx: SessionContext, home: Path | None = None) -> ConfigDiscoveryResult:
    """Return the existing candidate directories, classified by category.

    When the alternative location exists but the primary config location
    does not, the alternative fills the primary config role.
    """
    home = home or ctx.settings.home_dir
    categories: dict[ConfigCategory, Path] = {}
    found: list[Path] = []

    for parts, category in CANDIDATE_PATHS:
        path = home.joinpath(*parts)
        if not path.is_dir():
            continue
        ctx.log.info("Found tool config", path=str(path))
        found.append(path)
        if category is not None:
            categories.setdefault(category, path)

    alternative = categories.get(ConfigCategory.ALTERNATIVE)
    if alternative is not None and ConfigCategory.PRIMARY_CONFIG not in categories:
        categories[ConfigCategory.PRIMARY_CONFIG] = alternative
        ctx.log.info("Using alternative config location", path=str(alternative))

    if not found:
        ctx.log.warning(
            "No tool configuration found on host - container will start with default settings"
        )

    return ConfigDiscoveryResult(categories=categories, found=tuple(found))
