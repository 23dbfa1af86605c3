"""DonkeyConfig and environment loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from donkey.fs.utils import normalize_path, path_join

ENV_PREFIX = "DONKEY_"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class DonkeyConfig(BaseSettings):
    """Configuration for one gateway process.

    Every field can be set from a ``DONKEY_``-prefixed environment
    variable.  List fields take comma-separated values::

        DONKEY_DATABASE_URL=postgresql://db/donkey
        DONKEY_HOME_ROOT=/iplant/home
        DONKEY_IRODS_ADMINS=rods,rodsadmin
        DONKEY_PORT=31325

    Passed explicitly to ``StoreSessionFactory`` and the services; there
    is no module-level configuration state.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file_encoding="utf-8",
        extra="ignore",
        use_attribute_docstrings=True,
    )

    database_url: str = "sqlite:///donkey.db"
    """SQLAlchemy URL of the path store database."""

    zone: str = "iplant"
    """Store zone name."""

    home_root: str = "/iplant/home"
    """Directory holding every user's home directory."""

    trash_root: str = "/iplant/trash/home/rods"
    """Directory holding every user's trash directory."""

    irods_user: str = "rods"
    """Service account the gateway acts as.  Treated as the superuser."""

    irods_admins: Annotated[tuple[str, ...], NoDecode] = ("rods", "rodsadmin")
    """Administrative accounts ignored when deciding if a directory is still shared."""

    perms_filter: Annotated[tuple[str, ...], NoDecode] = ("rods", "rodsadmin")
    """Accounts hidden from permission listings."""

    max_paths: int = 1000
    """Maximum number of paths accepted in one request."""

    max_name_attempts: int = 1000
    """Upper bound on unique-name probing (trash suffixes, restore targets, ticket ids)."""

    trash_suffix_length: int = 7

    host: str = "0.0.0.0"
    port: int = 31325
    log_level: str = "INFO"

    community_data: str = ""
    """Community data directory.  Defaults to ``<home_root>/shared``."""

    @field_validator("home_root", "trash_root")
    @classmethod
    def _normalize_root(cls, value: str) -> str:
        return normalize_path(value)

    @field_validator("irods_admins", "perms_filter", mode="before")
    @classmethod
    def _split_list(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(v.strip() for v in value.split(",") if v.strip())
        return value

    @model_validator(mode="after")
    def _default_community_data(self) -> DonkeyConfig:
        if not self.community_data:
            self.community_data = path_join(self.home_root, "shared")
        return self

    def user_home_dir(self, user: str) -> str:
        return path_join(self.home_root, user)

    def user_trash_dir(self, user: str) -> str:
        return path_join(self.trash_root, user)

    def is_superuser(self, user: str) -> bool:
        return user == self.irods_user


def load_config(env_file: str | Path | None = None) -> DonkeyConfig:
    """Build a ``DonkeyConfig`` from ``DONKEY_*`` environment variables.

    Values from *env_file* (a dotenv file) apply where the environment
    leaves a variable unset.  Invalid values raise
    ``pydantic.ValidationError``.
    """
    return DonkeyConfig(_env_file=env_file)


def configure_logging(config: DonkeyConfig) -> None:
    """Configure root logging from *config*."""
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)
