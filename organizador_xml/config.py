"""Módulo para constantes de configuração da aplicação."""

from pathlib import Path

# --- Configurações Gerais ---
# Pasta criada dentro do diretório do usuário quando --dest não é informado
DEFAULT_DEST_DIRNAME = "docs_fiscais"

# Número de workers usados na fase de cópia
DEFAULT_WORKERS = 4

# --- Configurações da Chave de Acesso ---
TAMANHO_CHAVE = 44

# Janela (em meses de calendário) que separa documentos recentes dos antigos.
# Aplica-se apenas a NFe e CTe.
MESES_JANELA = 6

# --- Extensões reconhecidas na varredura (comparação sem diferenciar maiúsculas) ---
XML_EXTENSION = ".xml"
ZIP_EXTENSION = ".zip"

# --- Estrutura de Destino ---
# Nomes das subpastas de idade (usadas por NFe e CTe)
PASTA_MAIS_DE_6_MESES = "OlderThan6Months"
PASTA_MENOS_DE_6_MESES = "Within6Months"

# Estrutura criada dentro do diretório base antes de qualquer cópia
DESTINATION_STRUCTURE = (
    "CTe",
    f"CTe/{PASTA_MAIS_DE_6_MESES}",
    f"CTe/{PASTA_MENOS_DE_6_MESES}",
    "NFe",
    f"NFe/{PASTA_MAIS_DE_6_MESES}",
    f"NFe/{PASTA_MENOS_DE_6_MESES}",
    "MDFe",
    "NFCe",
)

# Prefixo dos diretórios temporários de extração de zips
TEMP_PREFIX = "organizador_xml_"


def default_dest_base() -> Path:
    """Diretório destino padrão: ~/docs_fiscais."""
    return Path.home() / DEFAULT_DEST_DIRNAME
