import zipfile
from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture
def io_dirs(tmp_path: Path):
    root_dir = tmp_path / "root"
    dest_dir = tmp_path / "dest"
    root_dir.mkdir(parents=True, exist_ok=True)
    return root_dir, dest_dir


@pytest.fixture
def make_xml():
    def _make(directory: Path, filename: str, content: str = "<nfeProc/>") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def make_zip():
    def _make(zip_path: Path, entries) -> Path:
        zip_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, payload in entries:
                archive.writestr(name, payload)
        return zip_path

    return _make


@pytest.fixture
def log_records():
    """Captura as mensagens do loguru como tuplas (nível, mensagem)."""
    records = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    try:
        yield records
    finally:
        logger.remove(handler_id)
