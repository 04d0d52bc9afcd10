"""Provider clients for the lookup services."""

from .base import BaseLookupClient, FetchResult, FetchStatus
from .giantbomb import GiantBombClient
from .igdb import IgdbClient, IgdbTokenService
from .musicbrainz import MusicBrainzClient
from .openlibrary import OpenLibraryClient
from .tmdb import TmdbClient
from .upcitemdb import UpcItemDbClient

__all__ = [
    "BaseLookupClient",
    "FetchResult",
    "FetchStatus",
    "GiantBombClient",
    "IgdbClient",
    "IgdbTokenService",
    "MusicBrainzClient",
    "OpenLibraryClient",
    "TmdbClient",
    "UpcItemDbClient",
]
