"""TicketService: create, remove, list and revoke path tickets."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from . import validators
from .exceptions import NameGenerationError
from .types import TicketsResult
from .utils import normalize_path

if TYPE_CHECKING:
    from donkey.config import DonkeyConfig

    from .protocol import PathStore

logger = logging.getLogger(__name__)


class TicketService:
    """Ticket management.

    Stateless: receives the configuration at construction and a store
    at call time.
    """

    def __init__(self, config: DonkeyConfig) -> None:
        self._config = config

    def _new_ticket_ids(self, store: PathStore, count: int) -> list[str]:
        """Generate *count* unused, distinct ticket ids.

        Each id is retried up to ``max_name_attempts`` times.
        """
        ids: list[str] = []
        for _ in range(count):
            for _attempt in range(self._config.max_name_attempts):
                candidate = str(uuid.uuid4()).upper()
                if candidate not in ids and store.get_ticket(candidate) is None:
                    ids.append(candidate)
                    break
            else:
                raise NameGenerationError(
                    "Could not generate a unique ticket id",
                    attempts=self._config.max_name_attempts,
                )
        return ids

    def add_tickets(
        self, store: PathStore, user: str, paths: list[str], *, public: bool = False
    ) -> TicketsResult:
        """Create one ticket per path, optionally flagged public."""
        paths = [normalize_path(p) for p in paths]
        validators.num_paths(self._config, paths)
        validators.user_exists(store, user)
        validators.all_paths_exist(store, paths)
        validators.all_paths_writeable(store, user, paths)

        ticket_ids = self._new_ticket_ids(store, len(paths))
        tickets = []
        for path, ticket_id in zip(paths, ticket_ids, strict=True):
            logger.info("Adding ticket for %s as %s (public=%s)", path, ticket_id, public)
            tickets.append(store.create_ticket(ticket_id, path, user, public=public))
        return TicketsResult(user=user, tickets=tickets)

    def remove_tickets(self, store: PathStore, user: str, ticket_ids: list[str]) -> TicketsResult:
        validators.user_exists(store, user)
        validators.all_tickets_exist(store, ticket_ids)

        tickets = [store.get_ticket(t) for t in ticket_ids]
        validators.all_paths_writeable(store, user, [t.path for t in tickets if t is not None])

        for ticket_id in ticket_ids:
            store.delete_ticket(ticket_id)
        return TicketsResult(user=user, tickets=[t for t in tickets if t is not None])

    def list_tickets_for_paths(
        self, store: PathStore, user: str, paths: list[str]
    ) -> dict[str, list[str]]:
        """Map each path to the ids of the tickets bound directly to it."""
        paths = [normalize_path(p) for p in paths]
        validators.user_exists(store, user)
        validators.all_paths_exist(store, paths)
        validators.all_paths_readable(store, user, paths)

        return {
            path: [t.ticket_id for t in store.tickets_under(path) if t.path == path]
            for path in paths
        }

    def revoke_tickets(self, store: PathStore, path: str) -> list[str]:
        """Delete every ticket bound to *path* or anything beneath it."""
        revoked = []
        for ticket in store.tickets_under(path):
            store.delete_ticket(ticket.ticket_id)
            revoked.append(ticket.ticket_id)
        if revoked:
            logger.info("Revoked %d tickets under %s", len(revoked), path)
        return revoked
