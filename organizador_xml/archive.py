"""Extração segura de arquivos .zip (proteção contra path traversal)."""

import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Iterator, List

from loguru import logger

from .config import TEMP_PREFIX
from .exceptions import ArchiveError


def is_unsafe_entry_name(name: str) -> bool:
    """
    Indica se o nome armazenado de uma entrada do zip pode escapar do diretório de extração.

    Rejeita nomes absolutos (/etc, \\server, C:\\...) e nomes com segmento '..'.
    """
    if not name:
        return True
    if name.startswith(("/", "\\")):
        return True
    if PurePosixPath(name).is_absolute() or PureWindowsPath(name).drive:
        return True
    segmentos = name.replace("\\", "/").split("/")
    return ".." in segmentos


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.resolve().relative_to(directory.resolve())
        return True
    except ValueError:
        return False


def safe_extract_zip(zip_path: Path, extract_to: Path) -> List[Path]:
    """
    Extrai o conteúdo de um .zip para `extract_to`, ignorando entradas inseguras.

    Entradas de diretório apenas criam o diretório; entradas de arquivo são gravadas
    por completo e seus caminhos entram na lista de retorno.

    Args:
        zip_path: Caminho do arquivo .zip.
        extract_to: Diretório (já existente) onde o conteúdo será materializado.

    Returns:
        Lista com os caminhos dos arquivos extraídos.

    Raises:
        ArchiveError: Se o arquivo não for um zip válido ou uma entrada não puder ser lida.
        OSError: Para falhas de I/O ao abrir o zip ou gravar no disco.
    """
    extracted_paths: List[Path] = []
    try:
        with zipfile.ZipFile(zip_path) as archive:
            for info in archive.infolist():
                name = info.filename
                if is_unsafe_entry_name(name):
                    logger.warning(f"Ignorando entrada insegura no zip {zip_path}: {name}")
                    continue

                outpath = extract_to / name
                if not _is_within(outpath, extract_to):
                    logger.warning(f"Ignorando entrada fora do diretório de extração em {zip_path}: {name}")
                    continue

                if info.is_dir():
                    outpath.mkdir(parents=True, exist_ok=True)
                    continue

                outpath.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(outpath, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                extracted_paths.append(outpath)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, EOFError, RuntimeError) as e:
        # RuntimeError: zip protegido por senha
        raise ArchiveError(f"Falha lendo zip {zip_path}: {e}") from e

    logger.debug(f"{len(extracted_paths)} arquivo(s) extraído(s) de {zip_path} para {extract_to}")
    return extracted_paths


@contextmanager
def extracted_zip(zip_path: Path) -> Iterator[List[Path]]:
    """
    Extrai o zip em um diretório temporário exclusivo e o remove ao sair do bloco.

    A remoção acontece em qualquer saída (sucesso, falha de extração ou erro no
    processamento dos membros).

    Yields:
        Lista de arquivos extraídos (dentro do diretório temporário).
    """
    with tempfile.TemporaryDirectory(prefix=TEMP_PREFIX) as temp_dir:
        logger.debug(f"Diretório temporário para {zip_path.name}: {temp_dir}")
        yield safe_extract_zip(zip_path, Path(temp_dir))
