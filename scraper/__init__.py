"""
Scraper de guildas e perfis de aventureiro
"""
from .client import BDOClient
from .exceptions import ScrapeError
from .models import PlayerLink, ScrapedProfile, GuildScrapeResult, ScrapeMode

__all__ = ['BDOClient', 'ScrapeError', 'PlayerLink', 'ScrapedProfile', 'GuildScrapeResult', 'ScrapeMode']
