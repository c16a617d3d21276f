"""
Errors for NetStorageFS
"""

class IOSError(OSError):
    """
    OSError carrying an errno.

    pyftpdlib catches OSError around the filesystem calls and reports
    `strerror` back to the client, so every failure of the FTP bridge
    is raised as one of these.
    """

class DirectoryExistsError(IOSError, FileExistsError):
    """
    The storage answered 409 Conflict to a mkdir.

    Kept apart from the generic transport failures so the callers can
    tell "already there" from "broken".
    """

class ConfigurationTypeError(TypeError):
    """A configuration option is not of the expected type."""

class VisibilityNotSupportedError(NotImplementedError):
    """NetStorage has no visibility model."""
