"""Exceções do organizador de XMLs fiscais."""


class OrganizadorError(Exception):
    """Exceção base do projeto."""
    pass


class RootNotFoundError(OrganizadorError):
    """Levantada quando o diretório raiz da varredura não existe.

    É a única condição fatal: interrompe a execução antes de qualquer trabalho.
    """

    def __init__(self, root):
        self.root = root
        super().__init__(f"Diretório raiz não existe: {root}")


class ArchiveError(OrganizadorError, OSError):
    """Levantada quando um arquivo .zip não pode ser aberto ou lido.

    Herda de OSError para que quem trata falhas de I/O trate também esta.
    """
    pass


class DestinationError(OrganizadorError, OSError):
    """Levantada quando a estrutura de pastas de destino não pode ser criada."""

    def __init__(self, base, cause):
        self.base = base
        super().__init__(f"Não foi possível preparar o diretório destino {base}: {cause}")
