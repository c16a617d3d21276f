import logging
from urllib.parse import quote

import requests

from netstoragefs.actions import ActionHeader
from netstoragefs.config import connection_settings

class NetStorageConnection(requests.Session):
    """
    HTTP transport to a NetStorage host.

    Requests are made with physical paths, relative to `base_url`, and get
    the client wide default options unless the call sets them. Responses
    out of the 2xx range raise requests.HTTPError.

    Request signing is left to `auth` (any requests authentication
    object).
    """

    def __init__(self, base_url, auth=None, **defaults):
        super(NetStorageConnection, self).__init__()
        self.base_url = base_url.rstrip('/')
        self.auth = auth
        self.defaults = defaults

    @classmethod
    def from_config(cls, config, auth=None):
        base_url, _, defaults = connection_settings(config)
        return cls(base_url, auth=auth, **defaults)

    def get_config(self, option=None):
        """Return the client wide default for option (all of them if None)"""
        if option is None:
            return dict(self.defaults)
        return self.defaults.get(option)

    def url(self, path):
        if path.startswith(('http://', 'https://')):
            return path
        return self.base_url + quote(path, safe='/')

    def request(self, method, url, **kwargs):
        for option, value in self.defaults.items():
            if option not in kwargs:
                kwargs[option] = value
            elif isinstance(value, dict) and isinstance(kwargs[option], dict):
                kwargs[option] = dict(value, **kwargs[option])

        headers = kwargs.get('headers')
        if headers:
            kwargs['headers'] = dict((name, str(value) if isinstance(value, ActionHeader) else value)
                                     for name, value in headers.items())

        url = self.url(url)
        logging.debug("%s %r headers=%r" % (method, url, kwargs.get('headers')))
        response = super(NetStorageConnection, self).request(method, url, **kwargs)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            # release the pooled connection of a streamed response
            response.close()
            raise
        return response
