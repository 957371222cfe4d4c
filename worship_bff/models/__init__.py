from worship_bff.models.base import Document
from worship_bff.models.message import Message
from worship_bff.models.scientist import Scientist

__all__ = ["Document", "Message", "Scientist"]
