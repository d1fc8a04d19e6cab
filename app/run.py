"""Ponto de entrada da aplicação e orquestrador do processo."""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger

from organizador_xml import __version__
from organizador_xml.config import DEFAULT_WORKERS, default_dest_base
from organizador_xml.exceptions import DestinationError, RootNotFoundError
from organizador_xml.organizer import process_root

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)
DETAILED_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


# --- Configuração de Logging --- #
def configure_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configura o logger Loguru: console sempre, arquivo com rotação se `log_dir` for informado."""
    log_level = log_level.upper()

    logger.remove()  # Remove handlers padrão
    logger.add(sys.stderr, level=log_level, format=LOG_FORMAT, colorize=True)

    if log_dir is None:
        return

    log_dir = Path(log_dir).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y_%m_%d_%H%M%S")
    run_log_path = log_dir / f"organizador_{timestamp}.log"
    logger.add(
        run_log_path,
        level="DEBUG",
        format=DETAILED_LOG_FORMAT,
        rotation="50 MB",
        retention=5,
        compression="zip",
        enqueue=True,
        encoding='utf-8'
    )
    logger.info(f"Logging configurado. Nível console: {log_level}. Arquivo da execução: {run_log_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="organizar-xml",
        description="Organiza XMLs (NFe/CTe/MDFe/NFCe) pela chave de acesso contida no nome do arquivo."
    )
    parser.add_argument(
        "-r", "--root",
        type=Path,
        default=None,
        help="Diretório raiz para procurar (padrão: diretório do usuário)."
    )
    parser.add_argument(
        "--dest",
        type=Path,
        default=None,
        help="Diretório onde serão criadas as pastas NFe/CTe/MDFe/NFCe (padrão: ~/docs_fiscais)."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simula as operações sem copiar."
    )
    parser.add_argument(
        "-w", "--workers",
        type=_positive_int,
        default=DEFAULT_WORKERS,
        help=f"Número de workers para cópias (padrão: {DEFAULT_WORKERS})."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Exibe diagnóstico detalhado por arquivo (equivale a --log-level DEBUG)."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Define o nível de logging para o console."
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Se informado, grava também um arquivo de log com rotação neste diretório."
    )
    parser.add_argument(
        "--rename-duplicates",
        action="store_true",
        help="Em vez de ignorar arquivos com nome repetido no destino, copia com sufixo _1, _2..."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("o número de workers deve ser maior que zero")
    return number


# --- Ponto de Entrada Principal --- #
def main(argv: Optional[List[str]] = None) -> int:
    """Função principal para executar o script via CLI."""
    args = build_parser().parse_args(argv)

    configure_logging(log_level="DEBUG" if args.verbose else args.log_level, log_dir=args.log_dir)

    root = (args.root or Path.home()).expanduser()
    dest_base = (args.dest or default_dest_base()).expanduser()

    logger.debug(f"Iniciando varredura em: {root}")
    logger.debug(f"Diretório destino base: {dest_base}")

    try:
        resultado = process_root(
            root=root,
            dest_base=dest_base,
            dry_run=args.dry_run,
            workers=args.workers,
            rename_duplicates=args.rename_duplicates
        )
    except RootNotFoundError as e:
        logger.error(str(e))
        return 1
    except DestinationError as e:
        logger.critical(str(e))
        return 1

    if resultado["failed"]:
        logger.warning(f"{resultado['failed']} cópia(s) falharam. Verifique os logs acima.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
