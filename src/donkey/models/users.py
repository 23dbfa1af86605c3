"""StoreUser model: accounts known to the path store."""

from __future__ import annotations

from sqlmodel import Field, SQLModel


class StoreUserBase(SQLModel):
    username: str = Field(primary_key=True)
    user_type: str = Field(default="rodsuser")


class StoreUser(StoreUserBase, table=True):
    """Default user table: ``donkey_users``."""

    __tablename__ = "donkey_users"
