"""
Configuration for NetStorageFS.

Config holds the per call settings (extra `headers` and request `options`),
parse_configuration reads the client settings from a configuration file:

    [netstorage]
    host = example-nsu.akamaihd.net
    cpcode = 123456
    timeout = 60
    verify = yes
"""

import logging
from collections.abc import Mapping
from configparser import RawConfigParser
from urllib.parse import parse_qsl

from netstoragefs.actions import ActionHeader
from netstoragefs.constants import acs_action_header, default_config_file, \
    default_scheme, default_timeout
from netstoragefs.errors import ConfigurationTypeError

# recomputed on every request, a caller can't set them
RESERVED_ACTION_OPTIONS = ('version', 'action', 'format')

def _is_of_type(value, expected_type):
    if expected_type is dict:
        return isinstance(value, Mapping)
    if expected_type is int and isinstance(value, bool):
        return False
    return isinstance(value, expected_type)

class Config(object):
    """Settings for a single operation, with an optional fallback Config."""

    def __init__(self, settings=None, fallback=None):
        self.settings = dict(settings or {})
        self.fallback = fallback

    def get(self, key, default=None):
        if key in self.settings:
            return self.settings[key]
        if self.fallback is not None:
            return self.fallback.get(key, default)
        return default

    def has(self, key):
        if key in self.settings:
            return True
        return self.fallback is not None and self.fallback.has(key)

    def set(self, key, value):
        self.settings[key] = value
        return self

    def get_or_default(self, key, expected_type, default=None):
        """Return the option, or default when it is not of expected_type"""
        value = self.get(key)
        if not _is_of_type(value, expected_type):
            return default
        return value

    def get_or_fail(self, key, expected_type):
        """Return the option, raise ConfigurationTypeError when it is not of expected_type"""
        value = self.get(key)
        if not _is_of_type(value, expected_type):
            raise ConfigurationTypeError("option of '%s' must be strictly of type '%s' got '%s'" % \
                                         (key, expected_type.__name__, type(value).__name__))
        return value

    @property
    def headers(self):
        return self.get_or_default('headers', dict, {})

    @property
    def options(self):
        return self.get_or_default('options', dict, {})

def prepare_request_headers(config, action, options=None):
    """
    Return the request headers with the action header computed.

    A caller supplied action header (either the raw protocol string or a
    mapping) provides the base parameters, `options` override them and
    the action header is always recomputed.
    """
    headers = dict(config.headers)
    if acs_action_header in headers:
        values = headers[acs_action_header]
        if isinstance(values, ActionHeader):
            values = values.options
        elif isinstance(values, str):
            values = dict(parse_qsl(values, keep_blank_values=True))
        if isinstance(values, Mapping):
            merged = dict((key, value) for key, value in values.items()
                          if key not in RESERVED_ACTION_OPTIONS)
            merged.update(options or {})
            options = merged
        else:
            logging.debug("ignoring %s header %r" % (acs_action_header, values))

    headers[acs_action_header] = ActionHeader(action, options)
    return headers

def merge_with_client_config(options, connection):
    """
    Merge mapping options with the client default of the same name.

    The caller keys win, the defaults only fill the missing ones. Any other
    value is taken from the caller.
    """
    merged = {}
    for option, value in options.items():
        client_value = connection.get_config(option)
        if isinstance(value, Mapping) and isinstance(client_value, Mapping):
            union = dict(client_value)
            union.update(value)
            value = union
        merged[option] = value
    return merged

def prepare_request_options(config, options, connection):
    """Options of a request: config options, then computed ones, then client defaults"""
    prepared = dict(options)
    prepared.update(config.options)
    return merge_with_client_config(prepared, connection)

def parse_configuration(config_file=default_config_file):
    """Parse the configuration file"""
    config = RawConfigParser({'host': None,
                              'cpcode': None,
                              'scheme': default_scheme,
                              'timeout': str(default_timeout),
                              'verify': 'yes',
                             })
    config.read(config_file)
    if not config.has_section('netstorage'):
        config.add_section('netstorage')
    return config

def connection_settings(config):
    """
    Extract the client settings of a parsed configuration.

    Returns a (base_url, cpcode, defaults) tuple, defaults being the client
    wide request options.
    """
    host = config.get('netstorage', 'host')
    cpcode = config.get('netstorage', 'cpcode')
    if not host:
        raise ValueError("A NetStorage host is required and it wasn't provided")
    if not cpcode:
        raise ValueError("A NetStorage CP code is required and it wasn't provided")

    try:
        timeout = float(config.get('netstorage', 'timeout'))
    except ValueError as errmsg:
        raise ValueError('Timeout error: %s' % errmsg)

    base_url = "%s://%s" % (config.get('netstorage', 'scheme'), host)
    defaults = dict(timeout=timeout,
                    verify=config.getboolean('netstorage', 'verify'),
                    )
    return base_url, cpcode, defaults
