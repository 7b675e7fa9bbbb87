"""
Parsers
"""
from .profile import ProfileParser, ProfileStats, parse_profile
from .guild import GuildParser, dedupe_links

__all__ = ['ProfileParser', 'ProfileStats', 'parse_profile', 'GuildParser', 'dedupe_links']
