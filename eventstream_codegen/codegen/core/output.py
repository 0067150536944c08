"""
Output units and file writing.

Generation builds every unit in memory first; nothing touches the
filesystem until the whole run has rendered successfully.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...logging_config import get_logger
from .shapes import Service

logger = get_logger(__name__)


@dataclass(frozen=True)
class OutputUnit:
    """One named text unit, with a path relative to the output root."""

    path: str
    content: str

    @property
    def suffix(self) -> str:
        return Path(self.path).suffix


def module_directory(service: Service, override: Optional[str] = None) -> str:
    """
    Relative directory for a service's generated files.

    Args:
        service: Service being generated
        override: Replaces the namespace-derived prefix; "" drops it

    Returns:
        Directory path using "/" separators
    """
    prefix = service.id.namespace.replace(".", "/") if override is None else override
    prefix = prefix.strip("/")
    name = service.name.lower()
    return f"{prefix}/{name}" if prefix else name


def comment_block(text: str, prefix: str) -> str:
    """Turn text into a line comment block."""
    return "\n".join(f"{prefix} {line}".rstrip() for line in text.strip().split("\n"))


class OutputComposer:
    """
    Assembles rendered text into OutputUnits.

    Applies the license header and the line-ending cleanup shared by
    every backend.
    """

    def __init__(self, comment_prefix: str, license_header: Optional[str] = None):
        self.comment_prefix = comment_prefix
        self.license_header = license_header
        self._units: List[OutputUnit] = []

    def add(self, path: str, content: str) -> OutputUnit:
        if any(unit.path == path for unit in self._units):
            raise ValueError(f"Duplicate output unit path: {path}")

        body = content.strip("\n") + "\n"
        if self.license_header:
            body = comment_block(self.license_header, self.comment_prefix) + "\n\n" + body

        unit = OutputUnit(path, body)
        self._units.append(unit)
        logger.debug("Composed %s (%d bytes)", path, len(body))
        return unit

    @property
    def units(self) -> List[OutputUnit]:
        return list(self._units)


def write_output_units(
    units: Iterable[OutputUnit],
    output_root: Union[str, Path],
    no_clobber: bool = True,
) -> List[Path]:
    """
    Write units below output_root.

    An existing file is reported with a warning. It is skipped when
    no_clobber is set and overwritten otherwise.

    Returns:
        Paths actually written
    """
    root = Path(output_root)
    units = list(units)
    written = []

    for unit in units:
        path = root / unit.path
        if path.exists():
            logger.warning(
                "Writing to an already existing file: %s. Check code generation "
                "logic if generation output dir was cleaned first",
                path,
            )
            if no_clobber:
                continue

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(unit.content, encoding="utf-8")
        written.append(path)
        logger.debug("Wrote %s", path)

    logger.info("Wrote %d of %d files under %s", len(written), len(units), root)
    return written
