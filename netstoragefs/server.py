"""
    NetStorage file system emulation for a FTP server.

Plug it into pyftpdlib with:

    NetStorageFtpFS.adapter = NetStorageFS(connection, cpcode)
    handler = FTPHandler
    handler.abstracted_fs = NetStorageFtpFS
"""

import stat
import logging
import posixpath
import tempfile
from errno import EPERM, ENOENT, EACCES, EIO, EEXIST, ENOTDIR, ENOTEMPTY
from functools import wraps

import requests
from pyftpdlib.filesystems import AbstractedFS

from netstoragefs.errors import IOSError
from netstoragefs.metadata import make_stat
from netstoragefs.utils import normalize_path

__all__ = ['NetStorageFtpFS']

def translate_netstorage_error(fn):
    """
    Decorator to catch transport errors and translating them into IOSError.

    Other exceptions are not caught.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        name = getattr(fn, "__name__", "unknown")
        log = lambda msg: logging.debug("At %s: %s" % (name, msg))
        try:
            return fn(*args, **kwargs)
        except requests.HTTPError as e:
            # some errno mapping
            status = getattr(e.response, 'status_code', None)
            if status == 404:
                err = ENOENT
            elif status == 400:
                err = EPERM
            elif status == 403:
                err = EACCES
            elif status == 409:
                err = EEXIST
            else:
                err = EIO

            msg = "%s: %s" % (status, getattr(e.response, 'reason', e))
            log(msg)
            raise IOSError(err, msg)
        except requests.RequestException as e:
            log(e)
            raise IOSError(EIO, str(e))
    return wrapper

class NetStorageFD(object):
    """
    File alike object attached to NetStorage.

    Reads are streamed from the storage, writes are buffered in a temporary
    file and uploaded when the file is closed.
    """

    def __init__(self, adapter, path, mode):
        self.adapter = adapter
        self.name = path
        self.mode = mode
        self.closed = False
        self.stream = None
        self.buffer = None

        if not path:
            self.closed = True
            raise IOSError(EPERM, 'File path required')

        if 'a' in mode or '+' in mode:
            self.closed = True
            raise IOSError(EPERM, 'Operation not permitted: open %r mode %r' % (path, mode))

        logging.debug("NetStorageFD object: %r (mode: %r)" % (path, mode))

        if 'r' in mode:
            self.stream = self._open_stream()
        else:
            self.buffer = tempfile.TemporaryFile()

    @translate_netstorage_error
    def _open_stream(self):
        return self.adapter.read_stream(self.name)['stream']

    def write(self, data):
        """Write data to the object."""
        if 'r' in self.mode:
            raise IOSError(EPERM, "File is opened for read")
        self.buffer.write(data)

    @translate_netstorage_error
    def read(self, size=65536):
        """Read data from the object."""
        if 'r' not in self.mode:
            raise IOSError(EPERM, "File is opened for write")
        return self.stream.read(size)

    def seek(self, offset, whence=None):
        """Seeking is not available, a download can't be resumed."""
        logging.debug("seek offset=%s, whence=%s" % (offset, whence))
        raise IOSError(EPERM, "Seek not available")

    @translate_netstorage_error
    def close(self):
        """Close the object, uploading the written data."""
        if self.closed:
            return
        self.closed = True
        if 'r' in self.mode:
            self.stream.close()
            return
        try:
            self.buffer.seek(0)
            if self.adapter.write_stream(self.name, self.buffer) is False:
                raise IOSError(EIO, 'Failed to store the file')
        finally:
            self.buffer.close()

class NetStorageFtpFS(AbstractedFS):
    """
    NetStorage file system emulation for pyftpdlib.

    The FTP root is the namespace root of the adapter.
    """
    adapter = None

    def __init__(self, root, cmd_channel, adapter=None):
        AbstractedFS.__init__(self, root, cmd_channel)
        if adapter is not None:
            self.adapter = adapter

    def logical_path(self, path):
        """The adapter path of a filesystem path"""
        return normalize_path(self.fs2ftp(path))

    def validpath(self, path):
        """Check whether the path belongs to user's home directory"""
        return True

    def realpath(self, path):
        """Return the canonical path of the specified path"""
        return path

    @translate_netstorage_error
    def open(self, filename, mode):
        """Open path with mode, raise IOError on error"""
        logging.debug("open %r mode %r" % (filename, mode))
        return NetStorageFD(self.adapter, self.logical_path(filename), mode)

    def mkstemp(self, suffix='', prefix='', dir=None, mode='wb'):
        e = "mkstemp suffix=%r prefix=%r, dir=%r mode=%r - not implemented" % (suffix, prefix, dir, mode)
        logging.debug(e)
        raise IOSError(EPERM, 'Operation not permitted: %s' % e)

    def chdir(self, path):
        """Change current directory, raise OSError on error"""
        logging.debug("chdir %r" % path)
        if not self.isdir(path):
            if self.lexists(path):
                raise IOSError(ENOTDIR, "Can't cd to a file")
            raise IOSError(ENOENT, 'No such file or directory')
        self.cwd = self.fs2ftp(path)

    @translate_netstorage_error
    def mkdir(self, path):
        """
        Make a directory.

        Raises OSError on error.
        """
        logging.debug("mkdir %r" % path)
        self.adapter.create_dir(self.logical_path(path))

    @translate_netstorage_error
    def listdir(self, path):
        """
        List a directory.

        Raises OSError on error.
        """
        logging.debug("listdir %r" % path)
        contents = self.adapter.list_contents(self.logical_path(path))
        return sorted(posixpath.basename(meta['path']) for meta in contents)

    listdirinfo = listdir

    @translate_netstorage_error
    def rmdir(self, path):
        """
        Remove a directory.

        Raise OSError on error.
        """
        logging.debug("rmdir %r" % path)
        logical = self.logical_path(path)
        if not logical:
            raise IOSError(EACCES, "Can't remove the root directory")

        meta = self.adapter.get_metadata(logical)
        if not meta:
            raise IOSError(ENOENT, 'No such file or directory')
        if meta['type'] != 'dir':
            raise IOSError(ENOTDIR, "Not a directory")
        if self.adapter.list_contents(logical):
            raise IOSError(ENOTEMPTY, "Directory not empty: %s" % logical)

        if not self.adapter.delete(logical):
            raise IOSError(EIO, "Failed to remove %s" % logical)

    @translate_netstorage_error
    def remove(self, path):
        """
        Remove a file.

        Raises OSError on error.
        """
        logging.debug("remove %r" % path)
        logical = self.logical_path(path)
        meta = self.adapter.get_metadata(logical)
        if not meta:
            raise IOSError(ENOENT, 'No such file or directory')
        if meta['type'] == 'dir':
            raise IOSError(EACCES, "Can't remove a directory (use rmdir instead)")

        if not self.adapter.delete(logical):
            raise IOSError(EIO, "Failed to remove %s" % logical)

    def rename(self, src, dst):
        """
        Rename a file/directory from src to dst.

        Raises OSError on error.
        """
        src = self.logical_path(src)
        dst = self.logical_path(dst)
        logging.debug("rename %r -> %r" % (src, dst))
        if src == dst:
            logging.debug("Renaming %r to itself - doing nothing" % src)
            return
        if not src or not dst:
            raise IOSError(EACCES, "Can't rename to / from root")
        if not self.adapter.rename(src, dst):
            raise IOSError(EIO, "Can't rename %r to %r" % (src, dst))

    def chmod(self, path, mode):
        """Change file/directory mode"""
        e = "chmod %03o %r - not implemented" % (mode, path)
        logging.debug(e)
        raise IOSError(EPERM, 'Operation not permitted: %s' % e)

    def utime(self, path, timeval):
        e = "utime %r - not implemented" % path
        logging.debug(e)
        raise IOSError(EPERM, 'Operation not permitted: %s' % e)

    @translate_netstorage_error
    def stat(self, path):
        """
        Return os.stat_result object for path.

        Raises OSError on error.
        """
        logical = self.logical_path(path)
        logging.debug("stat %r" % logical)
        if not logical:
            return make_stat({'type': 'dir'})
        meta = self.adapter.get_metadata(logical)
        if not meta:
            raise IOSError(ENOENT, 'No such file or directory %s' % logical)
        return make_stat(meta)

    lstat = stat

    def readlink(self, path):
        """
        Return a string representing the path to which a symbolic link points.

        We never return that we have a symlink in stat, so this should
        never be called.
        """
        e = "readlink %r - not implemented" % path
        logging.debug(e)
        raise IOSError(EPERM, 'Operation not permitted: %s' % e)

    def isfile(self, path):
        """
        Is this path a file.

        Shouldn't raise an error if not found like os.path.isfile.
        """
        try:
            return stat.S_ISREG(self.stat(path).st_mode)
        except EnvironmentError:
            return False

    def islink(self, path):
        return False

    def isdir(self, path):
        """
        Is this path a directory.

        Shouldn't raise an error if not found like os.path.isdir.
        """
        try:
            return stat.S_ISDIR(self.stat(path).st_mode)
        except EnvironmentError:
            return False

    def getsize(self, path):
        return self.stat(path).st_size

    def getmtime(self, path):
        return self.stat(path).st_mtime

    def lexists(self, path):
        """Test whether a path exists."""
        try:
            self.stat(path)
            return True
        except EnvironmentError:
            return False

    def get_user_by_uid(self, uid):
        return self.adapter.cpcode

    def get_group_by_gid(self, gid):
        return self.adapter.cpcode

    @translate_netstorage_error
    def md5(self, path):
        """
        Return the MD5 of the file at path.

        Raise OSError on error.
        """
        logical = self.logical_path(path)
        logging.debug("md5 %r" % logical)
        meta = self.adapter.get_metadata(logical)
        if not meta:
            raise IOSError(ENOENT, 'No such file or directory %s' % logical)
        if meta['type'] == 'dir':
            raise IOSError(EACCES, "Can't return the MD5 of a directory")
        if 'md5' not in meta:
            raise IOSError(EIO, "No MD5 available for %s" % logical)
        return meta['md5']
