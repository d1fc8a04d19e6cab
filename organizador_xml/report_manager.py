"""Módulo para geração do resumo legível da execução."""

from pathlib import Path
from typing import Iterable

import pandas as pd

from .file_manager import CopyTask

SUMMARY_COLUMNS = ["Destino", "Arquivos"]


def _relative_dest(destination_dir: Path, base: Path) -> str:
    try:
        return destination_dir.relative_to(base).as_posix()
    except ValueError:
        return str(destination_dir)


def build_summary(tasks: Iterable[CopyTask], base: Path) -> pd.DataFrame:
    """
    Agrupa as tarefas de cópia por pasta de destino.

    Args:
        tasks: Tarefas enfileiradas durante a varredura.
        base: Diretório base de destino, usado para exibir caminhos relativos.

    Returns:
        DataFrame com as colunas 'Destino' e 'Arquivos', ordenado por destino.
    """
    rows = [{"Destino": _relative_dest(task.destination_dir, base)} for task in tasks]
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df = pd.DataFrame(rows)
    summary = df.groupby("Destino").size().reset_index(name="Arquivos")
    return summary.sort_values("Destino").reset_index(drop=True)


def format_summary(summary: pd.DataFrame) -> str:
    """Formata o resumo como tabela de texto para o log."""
    if summary.empty:
        return "Nenhuma tarefa de cópia."
    return summary.to_string(index=False)
