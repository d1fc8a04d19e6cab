"""Organizador de XMLs fiscais (NFe, CTe, MDFe, NFCe) pela chave de acesso no nome do arquivo."""

__version__ = "1.0.0"
