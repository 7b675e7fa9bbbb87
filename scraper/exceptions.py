"""
Exceções do scraper
"""


class ScrapeError(Exception):
    """Falha ao buscar ou interpretar uma página (mensagem original preservada)"""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.message = message
        self.url = url
