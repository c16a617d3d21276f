"""
    A filesystem like interface to Akamai NetStorage.

Every operation is a HTTP verb plus the X-Akamai-ACS-Action header naming
the FileStore action, on the physical path of the file (the logical path
prefixed with the CP code).

Metadata is returned as dicts:

    {'type': 'file', 'path': 'dir/a.txt', 'visibility': 'public',
     'timestamp': 1500000000, 'size': 5, 'mimetype': 'text/plain', ...}
"""

import logging
import posixpath
from errno import EEXIST
from hashlib import sha1

import requests

from netstoragefs.actions import Action, ActionHeader
from netstoragefs.config import Config, prepare_request_headers, prepare_request_options, \
    connection_settings
from netstoragefs.connection import NetStorageConnection
from netstoragefs.constants import acs_action_header
from netstoragefs.errors import DirectoryExistsError, VisibilityNotSupportedError
from netstoragefs.metadata import parse_listing, handle_file_metadata
from netstoragefs import utils

__all__ = ['NetStorageFS']

def _status(exc):
    response = getattr(exc, 'response', None)
    return getattr(response, 'status_code', None)

class NetStorageFS(object):
    """
    NetStorage adapter.

    Read operations let the transport errors through, except a 404 on a
    metadata fetch which is reported as False. Mutating operations report
    transport errors as False.
    """

    def __init__(self, connection, cpcode):
        """
        connection - a NetStorageConnection (or anything with its interface)
        cpcode - the namespace all the paths live under
        """
        self.conn = connection
        self.cpcode = utils.strip_namespace(cpcode)

    @classmethod
    def from_config(cls, config, auth=None):
        """Create the adapter from a parsed configuration file"""
        _, cpcode, _ = connection_settings(config)
        return cls(NetStorageConnection.from_config(config, auth=auth), cpcode)

    def get_path_prefix(self):
        return utils.path_prefix(self.cpcode)

    def apply_path_prefix(self, path):
        return utils.apply_path_prefix(self.get_path_prefix(), path)

    def _action(self, action, options=None):
        return {acs_action_header: ActionHeader(action, options)}

    def get_metadata(self, path):
        """
        Return the metadata of path, False if it doesn't exist.

        Raises requests.RequestException on any other error.
        """
        logging.debug("stat %r" % path)
        try:
            response = self.conn.get(self.apply_path_prefix(path), headers=self._action(Action.STAT))
        except requests.HTTPError as e:
            if _status(e) != 404:
                raise
            return False

        _, nodes = parse_listing(response.content)
        logical = utils.normalize_path(path)
        if nodes:
            meta = handle_file_metadata(posixpath.dirname(logical), nodes[0])
        else:
            # no file node, the answer describes the path itself
            meta = handle_file_metadata(logical)
        if not logical:
            # the namespace root is reported by its cp code
            meta['path'] = ''
        return meta

    has = get_metadata
    get_size = get_metadata
    get_timestamp = get_metadata

    def get_mimetype(self, path):
        logging.debug("mimetype %r" % path)
        response = self.conn.head(self.apply_path_prefix(path), headers=self._action(Action.DOWNLOAD))
        return {'mimetype': response.headers.get('Content-Type')}

    def get_visibility(self, path):
        raise VisibilityNotSupportedError("%s does not support visibility. Path: %s" % \
                                          (self.__class__.__name__, path))

    def set_visibility(self, path, visibility):
        raise VisibilityNotSupportedError("%s does not support visibility. Path: %s, visibility: %s" % \
                                          (self.__class__.__name__, path, visibility))

    def list_contents(self, directory='', recursive=False):
        """
        List a directory.

        Returns a list of metadata dicts, directories get a `children` list
        when recursive.
        """
        logging.debug("listdir %r (recursive: %s)" % (directory, recursive))
        response = self.conn.get(self.apply_path_prefix(directory), headers=self._action(Action.DIR))
        _, nodes = parse_listing(response.content)

        contents = []
        for node in nodes:
            meta = handle_file_metadata(directory, node)
            if recursive and meta['type'] == 'dir':
                meta['children'] = self.list_contents(meta['path'], recursive)
            contents.append(meta)
        return contents

    def read(self, path):
        logging.debug("read %r" % path)
        response = self.conn.get(self.apply_path_prefix(path), headers=self._action(Action.DOWNLOAD))
        return {'contents': response.content}

    def read_stream(self, path):
        logging.debug("read stream %r" % path)
        response = self.conn.get(self.apply_path_prefix(path),
                                 headers=self._action(Action.DOWNLOAD),
                                 stream=True,
                                 )
        stream = response.raw
        if hasattr(stream, 'decode_content'):
            stream.decode_content = True
        return {'stream': stream}

    def _make_directory(self, dirname):
        """PUT the mkdir action, a 409 raises DirectoryExistsError"""
        logging.debug("mkdir %r" % dirname)
        try:
            self.conn.put(self.apply_path_prefix(dirname), headers=self._action(Action.MKDIR))
        except requests.HTTPError as e:
            if _status(e) == 409:
                raise DirectoryExistsError(EEXIST, "Directory already exists: %s" % dirname) from e
            raise

    def ensure_path(self, path):
        """
        Create the missing parent directories of path.

        The ancestors are checked closest first until one exists, then the
        missing ones are created from the root down. A directory created in
        between by someone else is not an error.
        """
        missing = []
        for parent in utils.parent_directories(path):
            if self.has(parent):
                break
            missing.append(parent)

        for dirname in reversed(missing):
            try:
                self._make_directory(dirname)
            except DirectoryExistsError:
                logging.debug("%r already exists" % dirname)

    def create_dir(self, dirname, config=None):
        """
        Create a directory and its missing parents.

        Returns the directory metadata, raises DirectoryExistsError if it
        already exists.
        """
        self.ensure_path(dirname)
        self._make_directory(dirname)
        return self.get_metadata(dirname)

    def write(self, path, contents, config=None):
        """
        Write a new file.

        `contents` in memory (str or bytes) are sent with their SHA-1, any
        other (a file like object) is streamed. Returns the file metadata
        or False on failure.
        """
        logging.debug("write %r" % path)
        config = config or Config()
        if isinstance(contents, str):
            body = contents.encode('utf-8')
        else:
            body = contents
        if isinstance(body, (bytes, bytearray)):
            action_options = {'sha1': sha1(body).hexdigest()}
        else:
            action_options = None

        try:
            self.ensure_path(path)
            options = prepare_request_options(config, {
                'headers': prepare_request_headers(config, Action.UPLOAD, action_options),
                'data': body,
            }, self.conn)
            self.conn.put(self.apply_path_prefix(path), **options)
        except requests.RequestException as e:
            logging.debug("write %r failed: %s" % (path, e))
            return False

        meta = self.get_metadata(path)
        if meta and isinstance(contents, (str, bytes, bytearray)):
            meta['contents'] = contents
        return meta

    def write_stream(self, path, resource, config=None):
        meta = self.write(path, resource, config)
        if meta:
            meta['stream'] = resource
        return meta

    def update(self, path, contents, config=None):
        # TODO: upload to a temporary name and rename over path so a failed
        # write doesn't lose the previous version
        self.delete(path)
        return self.write(path, contents, config)

    def update_stream(self, path, resource, config=None):
        self.delete(path)
        return self.write_stream(path, resource, config)

    def rename(self, path, newpath):
        logging.debug("rename %r -> %r" % (path, newpath))
        header = ActionHeader.rename(self.apply_path_prefix(newpath))
        try:
            self.conn.post(self.apply_path_prefix(path), headers={acs_action_header: header})
        except requests.RequestException as e:
            logging.debug("rename %r failed: %s" % (path, e))
            return False
        return True

    def copy(self, path, newpath):
        """Copy path into newpath streaming the contents"""
        logging.debug("copy %r -> %r" % (path, newpath))
        try:
            stream = self.read_stream(path)['stream']
        except requests.RequestException as e:
            logging.debug("copy %r failed: %s" % (path, e))
            return False
        try:
            result = self.write_stream(newpath, stream)
        finally:
            stream.close()
        return result is not False

    def _remove(self, path, is_dir):
        action = Action.RMDIR if is_dir else Action.DELETE
        logging.debug("%s %r" % (action.value, path))
        try:
            self.conn.put(self.apply_path_prefix(path), headers=self._action(action))
        except requests.RequestException as e:
            logging.debug("%s %r failed: %s" % (action.value, path, e))
            return False
        return True

    def delete(self, path):
        """Remove a file or an empty directory"""
        try:
            meta = self.get_metadata(path)
        except requests.RequestException as e:
            logging.debug("remove %r failed: %s" % (path, e))
            return False
        return self._remove(path, bool(meta) and meta['type'] == 'dir')

    def _delete_contents(self, dirname):
        try:
            contents = self.list_contents(dirname)
        except requests.RequestException as e:
            logging.debug("listdir %r failed: %s" % (dirname, e))
            return False
        for entry in contents:
            is_dir = entry['type'] == 'dir'
            if is_dir and not self._delete_contents(entry['path']):
                return False
            if not self._remove(entry['path'], is_dir):
                return False
        return True

    def delete_dir(self, dirname):
        """
        Remove everything under dirname, depth first.

        Stops at the first failed removal or listing and returns False, what
        has been removed so far stays removed.
        """
        logging.debug("rmtree %r" % dirname)
        if not self.has(dirname):
            return True
        return self._delete_contents(dirname)
