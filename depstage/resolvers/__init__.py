"""Source resolvers: turn a source URI into a staged local directory."""

from depstage.resolvers.base import (
    DepstageError,
    FetchAction,
    InvalidSourceError,
    ResolveInfo,
    Resolver,
    UnsupportedSourceError,
)
from depstage.resolvers.dispatcher import DEFAULT_RESOLVERS, SchemeDispatcher
from depstage.resolvers.dvcs import DistributedVCS
from depstage.resolvers.git import Git
from depstage.resolvers.mercurial import Mercurial
from depstage.resolvers.remote import RemoteResolver
from depstage.resolvers.staging import creates, unique_subdirectory_for
from depstage.resolvers.subversion import SubversionResolver
from depstage.resolvers.uri import SourceURI

__all__ = [
    "DEFAULT_RESOLVERS",
    "DepstageError",
    "DistributedVCS",
    "FetchAction",
    "Git",
    "InvalidSourceError",
    "Mercurial",
    "RemoteResolver",
    "ResolveInfo",
    "Resolver",
    "SchemeDispatcher",
    "SourceURI",
    "SubversionResolver",
    "UnsupportedSourceError",
    "creates",
    "unique_subdirectory_for",
]
