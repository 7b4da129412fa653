"""Executable entrypoint for the hazardfx preview."""

from __future__ import annotations

import logging

from .preview import HazardPreview
from .settings import SettingsManager


def main() -> None:
    """Launch the preview window."""
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    settings = SettingsManager().settings
    logging.getLogger().setLevel(getattr(logging, settings.log_level))
    HazardPreview(settings).run()


if __name__ == "__main__":
    main()
