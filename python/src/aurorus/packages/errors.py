"""
Package Service Errors

Every error carries the HTTP status the API layer reports it with.
"""


class AurorusError(Exception):
    """Base class for package service failures."""

    status_code = 500


class NetworkError(AurorusError):
    """The AUR could not be reached."""

    status_code = 502


class ProtocolError(AurorusError):
    """The AUR answered with a failure status or an unexpected payload."""

    status_code = 502


class ToolingError(AurorusError):
    """A local tool (pacman, git, makepkg) could not be run."""

    status_code = 500


class NotFoundError(AurorusError):
    """The AUR rejected a manifest request for a package."""

    status_code = 404


class SelectionError(AurorusError):
    """A catalog selection was non-numeric or out of range."""

    status_code = 400
