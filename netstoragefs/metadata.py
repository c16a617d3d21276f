import os
import stat
import time
import logging
import mimetypes
import posixpath
from xml.etree import ElementTree

from netstoragefs.constants import default_mimetype
from netstoragefs.utils import join_path, normalize_path

def parse_listing(body):
    """
    Parse a stat/dir XML document.

    Returns a (directory, file_nodes) tuple, e.g. for

        <stat directory="/1234/dir">
          <file type="file" name="a.txt" mtime="1500000000" size="5" md5="..."/>
        </stat>
    """
    root = ElementTree.fromstring(body)
    return root.get('directory', ''), root.findall('file')

def guess_mimetype(name):
    """Best effort mimetype from the file extension"""
    return mimetypes.guess_type(name or '')[0] or default_mimetype

def _timestamp(mtime):
    if mtime is None:
        return None
    try:
        return int(mtime)
    except ValueError:
        return mtime

def handle_file_metadata(base_dir, file_node=None):
    """
    Build the metadata dict of a file node found under base_dir.

    The required keys are computed first and the extended attributes of the
    node never override them. A missing node describes base_dir itself.
    """
    if file_node is None:
        attributes = {}
        meta = {
            'type': 'dir',
            'path': normalize_path(base_dir),
            'visibility': 'public',
            'timestamp': None,
        }
    else:
        attributes = file_node.attrib
        meta = {
            'type': attributes.get('type', ''),
            'path': join_path(base_dir, attributes.get('name', '')),
            'visibility': 'public',
            'timestamp': _timestamp(attributes.get('mtime')),
        }

    for attr, value in attributes.items():
        if attr not in meta:
            meta[attr] = value

    if 'size' in meta:
        try:
            meta['size'] = int(meta['size'])
        except ValueError:
            logging.debug("invalid size %r for %r" % (meta['size'], meta['path']))

    if 'mimetype' not in meta and meta['type'] != 'dir':
        meta['mimetype'] = guess_mimetype(posixpath.basename(meta['path']))

    return meta

def make_stat(meta):
    """Make an os.stat_result out of a metadata dict"""
    mtime = meta.get('timestamp')
    if not isinstance(mtime, int):
        mtime = time.time()
    if meta['type'] == 'dir':
        mode = 0o755 | stat.S_IFDIR
    else:
        mode = 0o644 | stat.S_IFREG
    size = meta.get('size')
    if not isinstance(size, int):
        size = 0
    #(mode, ino, dev, nlink, uid, gid, size, atime, mtime, ctime)
    return os.stat_result((mode, 0, 0, 1, 0, 0, size, mtime, mtime, mtime))
