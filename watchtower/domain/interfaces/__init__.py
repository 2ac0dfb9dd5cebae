from .i_contact_repository import IContactRepository
from .i_directory_crawler import IDirectoryCrawler
from .i_reputation_gateway import IReputationGateway, ReputationLookupError

__all__ = [
    "IContactRepository",
    "IDirectoryCrawler",
    "IReputationGateway",
    "ReputationLookupError",
]
