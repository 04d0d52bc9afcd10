"""Media-specific lookup strategies."""

from .base import LookupStrategy
from .book import BookLookupStrategy
from .game import GameCatalog, GameLookupStrategy, map_game_response
from .movie import MovieLookupStrategy, map_movie_response, select_movie
from .music import MusicLookupStrategy, map_music_response

__all__ = [
    "BookLookupStrategy",
    "GameCatalog",
    "GameLookupStrategy",
    "LookupStrategy",
    "MovieLookupStrategy",
    "MusicLookupStrategy",
    "map_game_response",
    "map_movie_response",
    "map_music_response",
    "select_movie",
]
