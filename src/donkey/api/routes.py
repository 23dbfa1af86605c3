"""Filesystem API routes.

Routes are plain ``def`` functions: FastAPI runs each in its worker
threadpool with a store session opened for the request.  The acting
user arrives as the ``user`` query parameter.
"""

from collections.abc import Iterator
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from donkey._donkey import Donkey
from donkey.fs import actions
from donkey.fs.database import DatabasePathStore
from donkey.fs.types import Permissions

from .schemas import (
    AddTicketsRequest,
    CopyRequest,
    CreateDirectoryRequest,
    CreateDirectoryResponse,
    DeleteTicketsRequest,
    ExistsResponse,
    ListTicketsResponse,
    MoveRequest,
    MoveResponse,
    PathPermissionsModel,
    PathsRequest,
    PathsResponse,
    PermissionsModel,
    RenameRequest,
    RestoreResponse,
    ShareRequest,
    ShareResponse,
    SharedRootsResponse,
    StatModel,
    StatResponse,
    TicketModel,
    TicketsResponse,
    TrashListingResponse,
    TrashResponse,
    UnshareRequest,
    UnshareResponse,
    UserPermissionsResponse,
)

router = APIRouter(prefix="/secured/filesystem", tags=["Filesystem"])


def get_donkey(request: Request) -> Donkey:
    return request.app.state.donkey


def get_store(request: Request) -> Iterator[DatabasePathStore]:
    """Open a store session for the request; closed on every exit path."""
    with get_donkey(request).factory.session() as store:
        yield store


User = Annotated[str, Query(min_length=1, description="Acting user")]
Store = Annotated[DatabasePathStore, Depends(get_store)]
Service = Annotated[Donkey, Depends(get_donkey)]


# ---------------------------------------------------------------------------
# Trash
# ---------------------------------------------------------------------------


@router.post("/delete", response_model=PathsResponse)
def delete(body: PathsRequest, user: User, store: Store, donkey: Service):
    """Move paths into the user's trash; purge paths already in it."""
    result = donkey.trash.delete_paths(store, user, body.paths)
    return PathsResponse(paths=result.paths)


@router.post("/restore", response_model=RestoreResponse)
def restore(body: PathsRequest, user: User, store: Store, donkey: Service):
    """Move trashed paths back to their original locations."""
    return RestoreResponse.from_result(donkey.trash.restore_paths(store, user, body.paths))


@router.get("/user-trash", response_model=TrashResponse)
def user_trash(user: User, store: Store, donkey: Service):
    return TrashResponse(trash=donkey.trash.user_trash(store, user).trash)


@router.get("/trash", response_model=TrashListingResponse)
def list_trash(user: User, store: Store, donkey: Service):
    listing = donkey.trash.list_trash(store, user)
    return TrashListingResponse(trash=listing.trash, paths=listing.paths)


@router.delete("/trash", response_model=TrashListingResponse)
def delete_trash(user: User, store: Store, donkey: Service):
    """Permanently delete everything in the user's trash."""
    listing = donkey.trash.delete_trash(store, user)
    return TrashListingResponse(trash=listing.trash, paths=listing.paths)


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------


@router.post("/share", response_model=ShareResponse)
def share(body: ShareRequest, user: User, store: Store, donkey: Service):
    result = donkey.sharing.share(
        store, user, body.grantees, body.paths, body.permissions.to_permissions()
    )
    return ShareResponse.from_result(result)


@router.post("/unshare", response_model=UnshareResponse)
def unshare(body: UnshareRequest, user: User, store: Store, donkey: Service):
    return UnshareResponse.from_result(
        donkey.sharing.unshare(store, user, body.grantees, body.paths)
    )


@router.get("/shared", response_model=SharedRootsResponse)
def shared_with_me(user: User, store: Store, donkey: Service):
    """Home directories containing something shared with the user."""
    return SharedRootsResponse(roots=donkey.sharing.list_shared_with_me(store, user))


@router.post("/user-permissions", response_model=UserPermissionsResponse)
def user_permissions(body: PathsRequest, user: User, store: Store, donkey: Service):
    listings = donkey.sharing.list_permissions(store, user, body.paths)
    return UserPermissionsResponse(paths=[PathPermissionsModel.from_listing(p) for p in listings])


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


@router.post("/tickets", response_model=TicketsResponse)
def add_tickets(body: AddTicketsRequest, user: User, store: Store, donkey: Service):
    result = donkey.tickets.add_tickets(store, user, body.paths, public=body.public)
    return TicketsResponse(
        user=result.user, tickets=[TicketModel.from_ticket(t) for t in result.tickets]
    )


@router.post("/delete-tickets", response_model=TicketsResponse)
def delete_tickets(body: DeleteTicketsRequest, user: User, store: Store, donkey: Service):
    result = donkey.tickets.remove_tickets(store, user, body.tickets)
    return TicketsResponse(
        user=result.user, tickets=[TicketModel.from_ticket(t) for t in result.tickets]
    )


@router.post("/list-tickets", response_model=ListTicketsResponse)
def list_tickets(body: PathsRequest, user: User, store: Store, donkey: Service):
    return ListTicketsResponse(
        tickets=donkey.tickets.list_tickets_for_paths(store, user, body.paths)
    )


# ---------------------------------------------------------------------------
# Filesystem actions
# ---------------------------------------------------------------------------


@router.post("/directory/create", response_model=CreateDirectoryResponse)
def create_directory(body: CreateDirectoryRequest, user: User, store: Store, donkey: Service):
    result = actions.create_directory(donkey.config, store, user, body.path)
    return CreateDirectoryResponse(
        path=result.path, permissions=PermissionsModel.from_permissions(result.permissions)
    )


@router.post("/move", response_model=MoveResponse)
def move(body: MoveRequest, user: User, store: Store, donkey: Service):
    result = actions.move_paths(donkey.config, store, donkey.tickets, user, body.sources, body.dest)
    return MoveResponse(sources=result.sources, dest=result.dest)


@router.post("/rename", response_model=MoveResponse)
def rename(body: RenameRequest, user: User, store: Store, donkey: Service):
    result = actions.rename_path(donkey.config, store, donkey.tickets, user, body.source, body.dest)
    return MoveResponse(sources=result.sources, dest=result.dest)


@router.post("/copy", response_model=MoveResponse)
def copy(body: CopyRequest, user: User, store: Store, donkey: Service):
    result = actions.copy_paths(donkey.config, store, user, body.paths, body.destination)
    return MoveResponse(sources=result.sources, dest=result.dest)


@router.post("/exists", response_model=ExistsResponse)
def exists(body: PathsRequest, user: User, store: Store):
    return ExistsResponse(paths=actions.paths_exist(store, user, body.paths))


@router.post("/stat", response_model=StatResponse)
def stat(body: PathsRequest, user: User, store: Store):
    infos = actions.stat_paths(store, user, body.paths)
    return StatResponse(
        paths={
            path: StatModel.from_info(
                info, Permissions.from_level(store.permission_level(user, path))
            )
            for path, info in infos.items()
        }
    )
