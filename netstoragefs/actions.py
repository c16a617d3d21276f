"""
The NetStorage FileStore action protocol.

Every request is a plain HTTP verb plus the X-Akamai-ACS-Action header
naming the real operation, e.g.

    X-Akamai-ACS-Action: version=1&action=rename&destination=%2F1234%2Fnew

ActionHeader keeps the operation and its parameters apart until the
connection serializes it for the wire.
"""

import enum
from urllib.parse import quote, urlencode

from netstoragefs.constants import acs_api_version, xml_actions

class Action(enum.Enum):
    MKDIR = 'mkdir'
    DELETE = 'delete'
    RMDIR = 'rmdir'
    STAT = 'stat'
    DIR = 'dir'
    DU = 'du'
    DOWNLOAD = 'download'
    RENAME = 'rename'
    UPLOAD = 'upload'

    @property
    def returns_xml(self):
        return self.value in xml_actions

def build_action_header(action, options=None):
    """
    Encode an action and its options into the header value.

    Options are appended in insertion order (None values are skipped)
    and format=xml is appended once for the actions returning XML.
    """
    if isinstance(action, Action):
        action = action.value
    header = 'version=%d&action=%s' % (acs_api_version, quote(action, safe=''))
    if options:
        query = urlencode([(key, value) for key, value in options.items() if value is not None])
        if query:
            header += '&' + query
    if action in xml_actions:
        header += '&format=xml'
    return header

class ActionHeader(object):
    """An action with its parameters."""

    def __init__(self, action, options=None):
        if not isinstance(action, Action):
            action = Action(action)
        self.action = action
        self.options = dict(options or {})

    @classmethod
    def rename(cls, destination):
        return cls(Action.RENAME, {'destination': destination})

    @classmethod
    def upload(cls, sha1=None):
        if sha1 is None:
            return cls(Action.UPLOAD)
        return cls(Action.UPLOAD, {'sha1': sha1})

    def __str__(self):
        return build_action_header(self.action, self.options)

    def __repr__(self):
        return "<ActionHeader %r %r>" % (self.action.value, self.options)

    def __eq__(self, other):
        if not isinstance(other, ActionHeader):
            return NotImplemented
        return self.action == other.action and list(self.options.items()) == list(other.options.items())
