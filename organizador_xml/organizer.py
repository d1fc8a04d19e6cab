"""Varredura do diretório raiz e orquestração do processo de organização."""

import os
from contextlib import ExitStack
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from loguru import logger

from .archive import extracted_zip
from .chave import find_chave_in_name
from .config import DEFAULT_WORKERS, XML_EXTENSION, ZIP_EXTENSION
from .exceptions import DestinationError, RootNotFoundError
from .file_manager import CopyScheduler, determine_destination_for_xml, ensure_directories
from .report_manager import build_summary, format_summary


def _log_walk_error(error: OSError) -> None:
    logger.warning(f"Não foi possível listar {error.filename}: {error}")


def _is_candidate(path: Path) -> bool:
    """Arquivo regular com extensão .xml/.zip; falhas de stat viram aviso e o arquivo é ignorado."""
    if path.suffix.lower() not in (XML_EXTENSION, ZIP_EXTENSION):
        return False
    try:
        return path.is_file()
    except OSError as e:
        logger.warning(f"Não foi possível acessar {path}: {e}. Pulando arquivo.")
        return False


def iter_candidate_files(root: Path) -> Iterator[Path]:
    """
    Percorre `root` recursivamente (sem seguir links) e devolve os arquivos .xml e .zip.

    A ordem é determinística: diretórios e arquivos são visitados em ordem alfabética.
    Se `root` for um arquivo, ele próprio é o único candidato.
    """
    if not root.is_dir():
        if _is_candidate(root):
            yield root
        return

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False, onerror=_log_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if _is_candidate(path):
                yield path


def queue_xml(path: Path, base: Path, today: date, scheduler: CopyScheduler) -> bool:
    """
    Classifica um arquivo XML pelo nome e enfileira a cópia.

    Returns:
        True se uma tarefa de cópia foi enfileirada.
    """
    chave = find_chave_in_name(path.name)
    if chave is None:
        logger.debug(f"Nenhuma chave de 44 dígitos em {path}")
        return False

    dest_dir = determine_destination_for_xml(base, chave, today)
    if dest_dir is None:
        return False

    scheduler.add(path, dest_dir)
    logger.debug(f"Enfileirado '{path.name}' -> {dest_dir}")
    return True


def process_zip(
    zip_path: Path,
    base: Path,
    today: date,
    scheduler: CopyScheduler,
    run_stack: ExitStack,
) -> int:
    """
    Extrai um zip em diretório temporário próprio e enfileira seus membros .xml.

    Se algum membro foi enfileirado, a remoção do diretório temporário é transferida
    para `run_stack` (ocorre depois da fase de cópia); caso contrário o diretório é
    removido imediatamente.

    Returns:
        Quantidade de membros enfileirados.
    """
    logger.debug(f"Processando zip: {zip_path}")
    with ExitStack() as archive_stack:
        try:
            members = archive_stack.enter_context(extracted_zip(zip_path))
        except OSError as e:
            logger.error(f"Falha ao extrair zip {zip_path}: {e}")
            return 0

        queued = 0
        for member in members:
            if member.suffix.lower() != XML_EXTENSION:
                continue
            if queue_xml(member, base, today, scheduler):
                queued += 1

        if queued:
            run_stack.push(archive_stack.pop_all())
    return queued


def process_root(
    root: Path,
    dest_base: Path,
    dry_run: bool = False,
    workers: int = DEFAULT_WORKERS,
    today: Optional[date] = None,
    rename_duplicates: bool = False,
) -> Dict[str, Any]:
    """
    Varre `root`, classifica os XMLs (soltos ou dentro de zips) e copia para `dest_base`.

    Args:
        root: Diretório raiz da varredura (ou um único arquivo .xml/.zip).
        dest_base: Diretório base onde ficam as pastas NFe/CTe/MDFe/NFCe.
        dry_run: Se True, nenhuma cópia é feita (apenas registrada no log).
        workers: Tamanho do pool de cópia.
        today: Data de referência para a faixa de idade (padrão: hoje).
        rename_duplicates: Se True, nomes repetidos recebem sufixo em vez de serem ignorados.

    Returns:
        Dicionário com: total, copied, dropped, failed, dry_run, tasks, summary.

    Raises:
        RootNotFoundError: Se `root` não existir.
        DestinationError: Se a estrutura de destino não puder ser criada.
    """
    root = Path(root)
    dest_base = Path(dest_base)
    if not root.exists():
        raise RootNotFoundError(root)

    today = today or date.today()
    try:
        ensure_directories(dest_base)
    except OSError as e:
        raise DestinationError(dest_base, e) from e

    scheduler = CopyScheduler(rename_duplicates=rename_duplicates)

    with ExitStack() as run_stack:
        for path in iter_candidate_files(root):
            try:
                if path.suffix.lower() == ZIP_EXTENSION:
                    process_zip(path, dest_base, today, scheduler, run_stack)
                else:
                    queue_xml(path, dest_base, today, scheduler)
            except Exception as e:
                logger.exception(f"Erro inesperado processando {path}: {e}. Pulando arquivo.")

        tasks = scheduler.tasks
        total = len(tasks)
        logger.info(f"Tarefas de cópia a executar: {total}")

        summary = build_summary(tasks, dest_base)
        logger.info(f"Resumo por destino:\n{format_summary(summary)}")

        stats = scheduler.execute(workers=workers, dry_run=dry_run)

    logger.info(
        f"Concluído: {total} cópias (simulação: {'sim' if dry_run else 'não'}). "
        f"Copiados: {stats['copied']}, Ignorados (já existentes): {stats['dropped']}, Falhas: {stats['failed']}"
    )

    stats["dry_run"] = dry_run
    stats["tasks"] = tasks
    stats["summary"] = summary
    return stats
