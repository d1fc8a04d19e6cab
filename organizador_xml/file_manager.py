"""Módulo para gerenciamento de arquivos e diretórios de destino."""

import shutil
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from loguru import logger

from .chave import classify_chave
from .config import DEFAULT_WORKERS, DESTINATION_STRUCTURE


class CopyTask(NamedTuple):
    """Par (arquivo de origem, diretório de destino) gerado pela varredura."""
    source: Path
    destination_dir: Path


# --- Estrutura de Diretórios --- #

def ensure_directories(base: Path) -> List[Path]:
    """
    Garante que toda a estrutura NFe/CTe/MDFe/NFCe exista dentro de `base`.

    Criar um diretório já existente não é erro.

    Args:
        base: Diretório base de destino (ex: ~/docs_fiscais).

    Returns:
        Lista dos diretórios que foram criados nesta chamada.

    Raises:
        OSError: Se algum diretório não puder ser criado.
    """
    created = []
    for rel in DESTINATION_STRUCTURE:
        path = base / rel
        if not path.is_dir():
            path.mkdir(parents=True, exist_ok=True)
            created.append(path)
            logger.debug(f"Criado diretório: {path}")
    return created


def determine_destination_for_xml(base: Path, chave: str, today: date) -> Optional[Path]:
    """
    Determina (e cria, se preciso) o diretório de destino para a chave informada.

    Returns:
        Caminho absoluto do diretório de destino, ou None se a chave não puder ser
        classificada ou se o diretório não puder ser criado.
    """
    rel = classify_chave(chave, today)
    if rel is None:
        return None

    dest = base.joinpath(*rel.parts)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Falha criando diretório {dest}: {e}")
        return None
    return dest


# --- Cópia de Arquivos --- #

def unique_dest(dest_dir: Path, file_name: str, claimed: Set[Path]) -> Path:
    """Gera um caminho livre adicionando sufixos _1, _2... ao nome do arquivo."""
    candidate = dest_dir / file_name
    stem, suffix = candidate.stem, candidate.suffix
    counter = 1
    while candidate in claimed or candidate.exists():
        candidate = dest_dir / f"{stem}_{counter}{suffix}"
        counter += 1
    return candidate


def copy_file_to_dest(src: Path, dest: Path, dry_run: bool = False) -> Path:
    """
    Copia `src` para `dest` (nunca move, nunca altera o conteúdo).

    Em modo simulação apenas registra a cópia pretendida.

    Raises:
        OSError: Em falhas de cópia (inclui shutil.Error).
    """
    if dry_run:
        logger.info(f"[SIMULAÇÃO] Copiaria '{src}' -> '{dest}'")
        return dest

    logger.debug(f"Copiando '{src}' -> '{dest}'")
    shutil.copy2(src, dest)
    return dest


class CopyScheduler:
    """
    Acumula as tarefas de cópia durante a varredura e as executa em paralelo depois.

    A inclusão de tarefas é protegida por um único lock. A lista só é lida depois
    que a varredura termina, em `execute`.
    """

    def __init__(self, rename_duplicates: bool = False):
        """
        Args:
            rename_duplicates: Se True, arquivos com o mesmo nome recebem sufixo
                numérico em vez de serem descartados.
        """
        self.rename_duplicates = rename_duplicates
        self._tasks: List[CopyTask] = []
        self._lock = threading.Lock()

    def add(self, source: Path, destination_dir: Path) -> None:
        with self._lock:
            self._tasks.append(CopyTask(source, destination_dir))

    @property
    def tasks(self) -> Tuple[CopyTask, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def _plan(self) -> Tuple[List[Tuple[CopyTask, Path]], int]:
        """
        Resolve o caminho final de cada tarefa, na ordem de inclusão.

        Returns:
            Tupla (tarefas_a_copiar, quantidade_descartada). Uma tarefa é descartada
            quando o arquivo já existe no destino ou quando uma tarefa anterior do
            mesmo lote já reservou o mesmo caminho.
        """
        planned = []
        claimed: Set[Path] = set()
        dropped = 0
        for task in self._tasks:
            file_name = task.source.name
            if self.rename_duplicates:
                target = unique_dest(task.destination_dir, file_name, claimed)
            else:
                target = task.destination_dir / file_name
                if target in claimed or target.exists():
                    logger.debug(f"Arquivo '{file_name}' já existe em {task.destination_dir}. Cópia ignorada.")
                    dropped += 1
                    continue
            claimed.add(target)
            planned.append((task, target))
        return planned, dropped

    def execute(self, workers: int = DEFAULT_WORKERS, dry_run: bool = False) -> Dict[str, int]:
        """
        Executa as cópias em um pool fixo de threads, uma tarefa por future.

        Falhas de uma tarefa são registradas e não interrompem as demais.

        Args:
            workers: Tamanho do pool de cópia.
            dry_run: Se True, apenas registra as cópias pretendidas.

        Returns:
            Dicionário com as estatísticas: total, copied, dropped, failed.
        """
        planned, dropped = self._plan()
        stats = {"total": len(self._tasks), "copied": 0, "dropped": dropped, "failed": 0}
        if not planned:
            return stats

        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            futures = {
                executor.submit(copy_file_to_dest, task.source, target, dry_run): (task, target)
                for task, target in planned
            }
            for future in as_completed(futures):
                task, target = futures[future]
                try:
                    future.result()
                    stats["copied"] += 1
                except OSError as e:
                    logger.error(f"Falha copiando {task.source} -> {task.destination_dir}: {e}")
                    stats["failed"] += 1

        return stats
