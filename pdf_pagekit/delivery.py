"""Hand a produced PDF to the user as a file on their own machine."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import DeliverySettings
from .exceptions import DeliveryCancelled, DeliveryError
from .utils import PathLike, display_name, ensure_path, mask_file_name

LOGGER = logging.getLogger("pdf_pagekit.delivery")


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def unique_destination(directory: Path, file_name: str) -> Path:
    """Return ``directory / file_name``, or ``name (n).pdf`` if that exists."""

    candidate = directory / file_name
    stem, suffix = candidate.stem, candidate.suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return candidate


def _prompt_for_destination(default: Path) -> Path:
    try:
        answer = click.prompt(
            "Save PDF as",
            default=str(default),
            type=click.Path(dir_okay=False, writable=True),
        )
        destination = ensure_path(answer)
        if destination.exists() and not click.confirm(
            f"{destination.name} already exists. Overwrite?", default=False
        ):
            raise DeliveryCancelled()
    except click.Abort as exc:
        raise DeliveryCancelled() from exc
    return destination


def _write(destination: Path, data: bytes) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        raise DeliveryError(f"Unable to save {destination.name}.") from exc


def deliver(
    data: bytes,
    suggested_name: str,
    *,
    destination: Optional[PathLike] = None,
    interactive: Optional[bool] = None,
    settings: Optional[DeliverySettings] = None,
) -> Path:
    """Save *data* and return where it was written.

    With an explicit *destination* the file goes straight there. Otherwise an
    interactive terminal is asked for a location (defaulting to the suggested
    name in the download directory); aborting that prompt raises
    :class:`DeliveryCancelled`. Without a terminal the file is saved into the
    download directory under a name that does not clobber existing files.
    """

    settings = settings or DeliverySettings()
    file_name = display_name(suggested_name)

    if destination is not None:
        target = ensure_path(destination)
    else:
        download_dir = ensure_path(settings.download_dir)
        if interactive is None:
            interactive = _is_interactive()
        if interactive:
            target = _prompt_for_destination(download_dir / file_name)
        else:
            target = unique_destination(download_dir, file_name)

    _write(target, data)
    LOGGER.info("Saved %s (%d bytes)", mask_file_name(target.name), len(data))
    return target


__all__ = ["deliver", "unique_destination"]
