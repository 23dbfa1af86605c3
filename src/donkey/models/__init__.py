"""SQLModel database models for the path store."""

from donkey.models.access import AccessEntry
from donkey.models.avus import ObjectAttribute
from donkey.models.objects import StoreObject
from donkey.models.tickets import Ticket
from donkey.models.users import StoreUser

__all__ = [
    "AccessEntry",
    "ObjectAttribute",
    "StoreObject",
    "StoreUser",
    "Ticket",
]
