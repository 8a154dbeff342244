# -*- coding: utf-8 -*-
"""The exchange snapshot is the read-only view of one request/response
pair that :mod:`organ.fields` resolves tokens against. Frameworks can
build :class:`Request` and :class:`Response` objects directly, or use
the WSGI constructors provided here.
"""

from boltons.dictutils import OrderedMultiDict as OMD
from boltons.cacheutils import cachedproperty

from organ.common import RESPONSE_TIME_HEADER
from organ.utils import parse_basic_auth


__all__ = ['Headers', 'Request', 'Response', 'Exchange']


# environ keys which carry request headers without the HTTP_ prefix
_CGI_HEADER_KEYS = {'CONTENT_TYPE': 'Content-Type',
                    'CONTENT_LENGTH': 'Content-Length'}


class Headers(object):
    """An ordered, case-insensitive mapping of HTTP header names to
    values. Repeated headers are kept; :meth:`get` joins them with
    ``", "``, which is how HTTP defines their combined value.

    >>> headers = Headers([('Content-Length', '42')])
    >>> headers.get('content-length')
    '42'
    """
    def __init__(self, items=None):
        self._omd = OMD()
        if hasattr(items, 'items'):
            items = items.items()
        for name, value in items or ():
            self.add(name, value)

    def add(self, name, value):
        self._omd.add(name.lower(), (name, str(value)))

    def set(self, name, value):
        self._omd[name.lower()] = (name, str(value))

    def get(self, name, default=None):
        if name is None:
            return default
        values = self._omd.getlist(name.lower())
        if not values:
            return default
        return ', '.join([v for _, v in values])

    def getlist(self, name):
        return [v for _, v in self._omd.getlist(name.lower())]

    def items(self):
        return list(self._omd.values(multi=True))

    def __contains__(self, name):
        return name.lower() in self._omd

    def __iter__(self):
        return iter(self.items())

    def __len__(self):
        return len(self._omd.values(multi=True))

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.items())

    @classmethod
    def from_environ(cls, environ):
        ret = cls()
        for key, value in environ.items():
            if key.startswith('HTTP_'):
                name = key[5:].replace('_', '-').title()
            elif key in _CGI_HEADER_KEYS:
                name = _CGI_HEADER_KEYS[key]
            else:
                continue
            if value == '':
                continue
            ret.add(name, value)
        return ret


class Request(object):
    """The request side of an exchange.

    Args:
        method (str): The request method, e.g., ``"GET"``.
        url (str): The request target, path plus query string.
        protocol (str): The protocol string, e.g., ``"HTTP/1.1"``.
        headers: A :class:`Headers` instance, or anything
            :class:`Headers` accepts (a dict or a list of pairs).
        remote_addr (str): Client address.
        remote_user (str): An identity already established upstream,
            e.g., the WSGI ``REMOTE_USER``. When unset, the user name
            is taken from Basic ``Authorization`` credentials.
    """
    def __init__(self, method, url, protocol='HTTP/1.1', headers=None,
                 remote_addr=None, remote_user=None):
        self.method = method
        self.url = url
        self.protocol = protocol
        if not isinstance(headers, Headers):
            headers = Headers(headers)
        self.headers = headers
        self.remote_addr = remote_addr
        self.remote_user = remote_user

    @cachedproperty
    def credentials(self):
        return parse_basic_auth(self.headers.get('Authorization'))

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s %s %s %s>' % (cn, self.method, self.url, self.protocol)

    @classmethod
    def from_environ(cls, environ):
        url = environ.get('REQUEST_URI') or environ.get('RAW_URI')
        if not url:
            url = environ.get('SCRIPT_NAME', '') + environ.get('PATH_INFO', '')
            if environ.get('QUERY_STRING'):
                url += '?' + environ['QUERY_STRING']
        return cls(method=environ.get('REQUEST_METHOD', 'GET'),
                   url=url or '/',
                   protocol=environ.get('SERVER_PROTOCOL', ''),
                   headers=Headers.from_environ(environ),
                   remote_addr=environ.get('REMOTE_ADDR') or None,
                   remote_user=environ.get('REMOTE_USER') or None)


class Response(object):
    def __init__(self, status=None, headers=None):
        self.status = status
        if not isinstance(headers, Headers):
            headers = Headers(headers)
        self.headers = headers

    def set_response_time(self, msecs):
        self.headers.set(RESPONSE_TIME_HEADER, msecs)

    def get_response_time(self):
        """Returns the elapsed milliseconds recorded by the wrapper as a
        float, or ``None`` when unset or unparseable."""
        try:
            return float(self.headers.get(RESPONSE_TIME_HEADER))
        except (TypeError, ValueError):
            return None

    def set_wsgi_status(self, status_line, headers):
        "Populate from the arguments of a WSGI ``start_response`` call."
        try:
            self.status = int(status_line.split(None, 1)[0])
        except (AttributeError, IndexError, ValueError):
            self.status = None
        self.headers = Headers(headers)

    def __repr__(self):
        return '<%s status=%r>' % (self.__class__.__name__, self.status)


class Exchange(object):
    def __init__(self, request, response=None):
        self.request = request
        self.response = response if response is not None else Response()

    def __repr__(self):
        return ('<%s request=%r response=%r>'
                % (self.__class__.__name__, self.request, self.response))

    @classmethod
    def from_environ(cls, environ):
        return cls(Request.from_environ(environ))
