def build_chave(modelo: str = "55", yy: str = "23", mm: str = "10", uf: str = "35") -> str:
    """Monta uma chave de 44 dígitos com ano, mês e modelo nas posições corretas."""
    chave = f"{uf}{yy}{mm}{'1' * 14}{modelo}{'0' * 22}"
    assert len(chave) == 44
    return chave
