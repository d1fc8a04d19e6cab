"""Extração e classificação da chave de acesso (44 dígitos) a partir do nome do arquivo."""

import re
from datetime import date
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from loguru import logger

from .config import MESES_JANELA, PASTA_MAIS_DE_6_MESES, PASTA_MENOS_DE_6_MESES, TAMANHO_CHAVE

# Sequência máxima de exatamente 44 dígitos (não aceita trechos de sequências maiores)
CHAVE_REGEX = re.compile(r'(?<!\d)(\d{44})(?!\d)', re.ASCII)

# Posições dos campos dentro da chave (fatias semiabertas)
SLICE_ANO = slice(2, 4)
SLICE_MES = slice(4, 6)
SLICE_MODELO = slice(20, 22)


class DocumentType(Enum):
    """Tipo do documento fiscal, derivado do campo modelo da chave."""
    NFE = "NFe"
    CTE = "CTe"
    MDFE = "MDFe"
    NFCE = "NFCe"
    DESCONHECIDO = "Desconhecido"

    @classmethod
    def from_modelo(cls, modelo: str) -> "DocumentType":
        """Mapeia o código do modelo; códigos fora da tabela viram DESCONHECIDO."""
        return MODELO_MAP.get(modelo, cls.DESCONHECIDO)

    @property
    def usa_faixa_idade(self) -> bool:
        return self in (DocumentType.NFE, DocumentType.CTE)


class AgeBucket(Enum):
    """Faixa de idade de NFe/CTe em relação à janela de 6 meses."""
    MAIS_DE_6_MESES = PASTA_MAIS_DE_6_MESES
    MENOS_DE_6_MESES = PASTA_MENOS_DE_6_MESES


MODELO_MAP = {
    "55": DocumentType.NFE,
    "57": DocumentType.CTE,
    "58": DocumentType.MDFE,
    "65": DocumentType.NFCE,
}


def find_chave_in_name(name: str) -> Optional[str]:
    """
    Procura no nome do arquivo a primeira sequência de exatamente 44 dígitos.

    Args:
        name: Nome do arquivo (ou qualquer string).

    Returns:
        A chave encontrada ou None se não houver sequência de 44 dígitos.
    """
    match = CHAVE_REGEX.search(name)
    return match.group(1) if match else None


def six_months_ago_reference(today: date) -> date:
    """Retorna o primeiro dia do mês que representa 6 meses atrás."""
    year = today.year
    month = today.month - MESES_JANELA
    while month <= 0:
        month += 12
        year -= 1
    return date(year, month, 1)


def classify_age(chave: str, today: date) -> Optional[AgeBucket]:
    """
    Decide a faixa de idade a partir do ano (chave[2:4]) e mês (chave[4:6]).

    Returns:
        AgeBucket ou None se ano/mês não puderem ser interpretados.
    """
    yy = chave[SLICE_ANO]
    mm = chave[SLICE_MES]
    if not (yy.isascii() and yy.isdigit() and mm.isascii() and mm.isdigit()):
        logger.warning(f"Erro interpretando ano/mês na chave {chave}")
        return None

    mes = int(mm)
    if mes < 1 or mes > 12:
        logger.warning(f"Mês inválido na chave {chave}: {mes}")
        return None

    data_emissao = date(2000 + int(yy), mes, 1)
    if data_emissao < six_months_ago_reference(today):
        return AgeBucket.MAIS_DE_6_MESES
    return AgeBucket.MENOS_DE_6_MESES


def classify_chave(chave: str, today: date) -> Optional[PurePosixPath]:
    """
    Classifica a chave e devolve o caminho relativo da pasta de destino.

    NFe e CTe são separados por faixa de idade (ex: 'NFe/OlderThan6Months');
    MDFe e NFCe vão direto para a pasta do tipo (ex: 'MDFe').

    Args:
        chave: Chave de acesso (deve ter 44 caracteres).
        today: Data de referência para o cálculo da faixa de idade.

    Returns:
        PurePosixPath relativo ou None se a chave não puder ser classificada.
        Nunca levanta exceção para chaves malformadas.
    """
    if len(chave) != TAMANHO_CHAVE:
        logger.warning(f"Chave com tamanho inesperado ({len(chave)}): {chave}")
        return None

    modelo = chave[SLICE_MODELO]
    tipo = DocumentType.from_modelo(modelo)
    if tipo is DocumentType.DESCONHECIDO:
        logger.info(f"Modelo desconhecido {modelo} em chave {chave}")
        return None

    if not tipo.usa_faixa_idade:
        return PurePosixPath(tipo.value)

    faixa = classify_age(chave, today)
    if faixa is None:
        return None
    return PurePosixPath(tipo.value, faixa.value)
