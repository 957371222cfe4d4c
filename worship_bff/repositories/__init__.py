from worship_bff.repositories.message import MessageRepository
from worship_bff.repositories.scientist import ScientistRepository

__all__ = ["MessageRepository", "ScientistRepository"]
