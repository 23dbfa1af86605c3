"""Pydantic request and response models for the filesystem endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from donkey.fs.types import (
    ObjectInfo,
    PathPermissions,
    Permissions,
    RestoreResult,
    ShareResult,
    SkippedShare,
    TicketInfo,
    UnshareResult,
)


class CamelModel(BaseModel):
    """Accepts both field names and aliases; serializes by alias."""

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


class PermissionsModel(BaseModel):
    read: bool = False
    write: bool = False
    own: bool = False

    def to_permissions(self) -> Permissions:
        return Permissions(read=self.read, write=self.write, own=self.own)

    @classmethod
    def from_permissions(cls, permissions: Permissions) -> PermissionsModel:
        return cls(**permissions.to_dict())


class PathsRequest(BaseModel):
    paths: list[str]


class PathsResponse(BaseModel):
    paths: list[str]


# ---------------------------------------------------------------------------
# Trash
# ---------------------------------------------------------------------------


class RestoredPathModel(CamelModel):
    restored_path: str = Field(alias="restoredPath")
    partial_restore: bool = Field(alias="partialRestore")


class RestoreResponse(BaseModel):
    restored: dict[str, RestoredPathModel]

    @classmethod
    def from_result(cls, result: RestoreResult) -> RestoreResponse:
        return cls(
            restored={
                path: RestoredPathModel(
                    restored_path=r.restored_path, partial_restore=r.partial_restore
                )
                for path, r in result.restored.items()
            }
        )


class TrashResponse(BaseModel):
    trash: str


class TrashListingResponse(BaseModel):
    trash: str
    paths: list[str]


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------


class ShareRequest(BaseModel):
    grantees: list[str]
    paths: list[str]
    permissions: PermissionsModel


class UnshareRequest(BaseModel):
    grantees: list[str]
    paths: list[str]


class SkippedModel(BaseModel):
    grantee: str
    path: str
    reason: str

    @classmethod
    def from_skipped(cls, skipped: SkippedShare) -> SkippedModel:
        return cls(grantee=skipped.grantee, path=skipped.path, reason=skipped.reason)


class ShareResponse(BaseModel):
    grantees: list[str]
    paths: list[str]
    skipped: list[SkippedModel]
    permissions: PermissionsModel

    @classmethod
    def from_result(cls, result: ShareResult) -> ShareResponse:
        return cls(
            grantees=result.grantees,
            paths=result.paths,
            skipped=[SkippedModel.from_skipped(s) for s in result.skipped],
            permissions=PermissionsModel.from_permissions(result.permissions),
        )


class UnshareResponse(BaseModel):
    grantees: list[str]
    paths: list[str]
    skipped: list[SkippedModel]

    @classmethod
    def from_result(cls, result: UnshareResult) -> UnshareResponse:
        return cls(
            grantees=result.grantees,
            paths=result.paths,
            skipped=[SkippedModel.from_skipped(s) for s in result.skipped],
        )


class SharedRootsResponse(BaseModel):
    roots: list[str]


class UserPermissionModel(BaseModel):
    user: str
    permissions: PermissionsModel


class PathPermissionsModel(CamelModel):
    path: str
    user_permissions: list[UserPermissionModel] = Field(alias="userPermissions")

    @classmethod
    def from_listing(cls, listing: PathPermissions) -> PathPermissionsModel:
        return cls(
            path=listing.path,
            user_permissions=[
                UserPermissionModel(
                    user=p.user, permissions=PermissionsModel.from_permissions(p.permissions)
                )
                for p in listing.user_permissions
            ],
        )


class UserPermissionsResponse(BaseModel):
    paths: list[PathPermissionsModel]


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


class AddTicketsRequest(BaseModel):
    paths: list[str]
    public: bool = False


class DeleteTicketsRequest(BaseModel):
    tickets: list[str]


class TicketModel(CamelModel):
    ticket_id: str = Field(alias="ticketId")
    path: str
    owner: str
    public: bool
    created_at: datetime | None = Field(default=None, alias="dateCreated")

    @classmethod
    def from_ticket(cls, ticket: TicketInfo) -> TicketModel:
        return cls(
            ticket_id=ticket.ticket_id,
            path=ticket.path,
            owner=ticket.owner,
            public=ticket.public,
            created_at=ticket.created_at,
        )


class TicketsResponse(BaseModel):
    user: str
    tickets: list[TicketModel]


class ListTicketsResponse(BaseModel):
    tickets: dict[str, list[str]]


# ---------------------------------------------------------------------------
# Filesystem actions
# ---------------------------------------------------------------------------


class CreateDirectoryRequest(BaseModel):
    path: str


class CreateDirectoryResponse(BaseModel):
    path: str
    permissions: PermissionsModel


class MoveRequest(BaseModel):
    sources: list[str]
    dest: str


class RenameRequest(BaseModel):
    source: str
    dest: str


class CopyRequest(BaseModel):
    paths: list[str]
    destination: str


class MoveResponse(BaseModel):
    sources: list[str]
    dest: str


class ExistsResponse(BaseModel):
    paths: dict[str, bool]


class StatModel(CamelModel):
    path: str
    label: str
    type: str
    size: int
    creator: str
    date_created: datetime | None = Field(default=None, alias="dateCreated")
    date_modified: datetime | None = Field(default=None, alias="dateModified")
    permissions: PermissionsModel

    @classmethod
    def from_info(cls, info: ObjectInfo, permissions: Permissions) -> StatModel:
        return cls(
            path=info.path,
            label=info.name,
            type="dir" if info.is_directory else "file",
            size=info.size_bytes,
            creator=info.creator,
            date_created=info.created_at,
            date_modified=info.updated_at,
            permissions=PermissionsModel.from_permissions(permissions),
        )


class StatResponse(BaseModel):
    paths: dict[str, StatModel]
