"""Console colors for repoctl.

The bundled palette (``repoctl/data/theme.toml``) can be adjusted by the
administrator through a ``[theme]`` table in the system config file::

    [theme]
    changed = "#ffaa00"

repoctl runs as root, so there is no per-user theme file.
"""

import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")]


class ThemeColors(BaseModel):
    """Palette for console output; every value is #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"
    changed: HexColor = "#0e8ac8"
    unchanged: HexColor = "#636e72"

    def to_rich(self) -> Theme:
        """Build the Rich theme with the style names used in markup."""
        styles = self.model_dump()
        styles["error"] = f"bold {self.error}"
        styles["changed"] = f"bold {self.changed}"
        styles["bold_header"] = f"bold {self.header}"
        return Theme(styles)


def _read_colors(path: Path, table: str) -> dict[str, Any]:
    """Return one table of a TOML file, or an empty dict if unusable."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring colors from %s: %s", path, e)
        return {}

    colors = data.get(table, {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring [%s] in %s: not a table", table, path)
        return {}
    return colors


def bundled_colors() -> ThemeColors:
    """Load the palette shipped with the package."""
    bundled = resources.files("repoctl.data").joinpath("theme.toml")
    try:
        return ThemeColors.model_validate(_read_colors(Path(str(bundled)), "colors"))
    except ValidationError as e:
        logger.error("Bundled theme is invalid, using built-in colors: %s", e)
        return ThemeColors()


def load_theme_colors(config_path: Path) -> ThemeColors:
    """Apply the ``[theme]`` table of the config file to the bundled palette.

    An invalid override is reported and ignored; colors never make a run fail.
    """
    base = bundled_colors()
    overrides = _read_colors(config_path, "theme")
    if not overrides:
        return base

    try:
        return ThemeColors.model_validate({**base.model_dump(), **overrides})
    except ValidationError as e:
        logger.warning("Ignoring [theme] in %s: %s", config_path, e)
        return base
