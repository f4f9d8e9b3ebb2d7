"""Shared pytest fixtures for Pathfinder tests."""
import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Generator, List

import pytest
import yaml

from pathfinder.core.logging import Logger, LogLevel


class ListHandler(logging.Handler):
    """Logging handler that keeps formatted messages in memory."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [record.getMessage() for record in self.records]

    def messages_at(self, level: int) -> List[str]:
        return [record.getMessage() for record in self.records if record.levelno == level]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log_handler() -> ListHandler:
    """In-memory log handler."""
    return ListHandler()


@pytest.fixture
def logger(log_handler: ListHandler) -> Logger:
    """Logger at DEBUG that writes only to the in-memory handler."""
    return Logger(name="pathfinder.test", level=LogLevel.DEBUG, handlers=[log_handler])


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Create a source tree to scan.

    data/
        config.json
        notes.txt
        logs/app.log
        logs/old/app.log.1
        cache/a/b.txt
        cache/c.bin
        cache-old/stale.txt
    """
    data = temp_dir / "data"
    data.mkdir()

    (data / "config.json").write_text('{"debug": true}')
    (data / "notes.txt").write_text("notes")

    (data / "logs").mkdir()
    (data / "logs" / "app.log").write_text("log line\n")
    (data / "logs" / "old").mkdir()
    (data / "logs" / "old" / "app.log.1").write_text("rotated\n")

    (data / "cache").mkdir()
    (data / "cache" / "a").mkdir()
    (data / "cache" / "a" / "b.txt").write_text("cached b")
    (data / "cache" / "c.bin").write_bytes(b"\x00\x01\x02")

    (data / "cache-old").mkdir()
    (data / "cache-old" / "stale.txt").write_text("stale")

    return data


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Directory archives are written to, outside the scanned tree."""
    out = temp_dir / "out"
    out.mkdir()
    return out


@pytest.fixture
def write_rules(temp_dir: Path) -> Callable[..., Path]:
    """Write a rule file from section lists and return its path."""

    def _write(name: str = "pathfinder.txt", text: str = None, **sections: List[str]) -> Path:
        path = temp_dir / name
        if text is None:
            lines = []
            for section, entries in sections.items():
                lines.append(f"[{section}]")
                lines.extend(entries)
            text = "\n".join(lines) + "\n"
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def settings_file(temp_dir: Path) -> Callable[[Dict], Path]:
    """Write a YAML settings file and return its path."""

    def _write(settings: Dict) -> Path:
        path = temp_dir / "pathfinder.yaml"
        with open(path, "w") as f:
            yaml.dump(settings, f)
        return path

    return _write


def read_archive(path: Path) -> Dict[str, List[bytes]]:
    """Map every entry name to the contents of each entry with that name."""
    entries: Dict[str, List[bytes]] = {}
    with zipfile.ZipFile(path) as zf:
        for info in zf.infolist():
            entries.setdefault(info.filename, []).append(zf.open(info).read())
    return entries


def archive_names(path: Path) -> List[str]:
    """Entry names in archive order, duplicates included."""
    with zipfile.ZipFile(path) as zf:
        return [info.filename for info in zf.infolist()]


@pytest.fixture(name="read_archive")
def read_archive_fixture() -> Callable[[Path], Dict[str, List[bytes]]]:
    return read_archive


@pytest.fixture(name="archive_names")
def archive_names_fixture() -> Callable[[Path], List[str]]:
    return archive_names
