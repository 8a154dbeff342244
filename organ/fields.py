# -*- coding: utf-8 -*-
"""organ comes with a built-in format *field* for every token in the
classic access-log vocabulary. A field knows how to pull its value out
of an :class:`~organ.exchange.Exchange`, and optionally how to decorate
that value when the formatter runs in debug mode.

======================  ==========  ===================================
Token                   Argument    Value
======================  ==========  ===================================
``:date``               style       current UTC time (clf, iso, web)
``:http-version``                   protocol without ``HTTP/``
``:method``                         request method
``:referrer``                       ``Referer`` header
``:remote-addr``                    client address
``:remote-user``                    upstream ``REMOTE_USER``, else the
                                    Basic auth user name
``:request``            header      request header value
``:response``           header      response header value
``:response-time``      digits      elapsed milliseconds
``:status``                         response status code
``:url``                            request target
``:user-agent``                     ``User-Agent`` header
======================  ==========  ===================================
"""

import time
import datetime
from email.utils import formatdate

from boltons.timeutils import UTC

from organ import colors
from organ.common import (DATE_STYLES, MISSING_VALUE, DateFormatError)


FIELD_MAP = {}
BUILTIN_FIELD_MAP = {}  # populated below

DEFAULT_RESPONSE_TIME_DIGITS = 3
MAX_RESPONSE_TIME_DIGITS = 100

_MONTH_ABBRS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def register_builtin_field(field):
    register_field(field)
    BUILTIN_FIELD_MAP[field.fname] = field


def register_field(field):
    """Make *field* available to every formatter created afterwards,
    e.g., to add an application-specific token."""
    if not isinstance(field, AccessField):
        raise TypeError('expected AccessField instance, not %r' % (field,))
    FIELD_MAP[field.fname] = field


def timestamp2clf(timestamp):
    "Common Log Format time, e.g., ``10/Oct/2000:13:55:36 +00:00``."
    dt = datetime.datetime.fromtimestamp(timestamp, tz=UTC)
    return ('%02d/%s/%04d:%02d:%02d:%02d +00:00'
            % (dt.day, _MONTH_ABBRS[dt.month - 1], dt.year,
               dt.hour, dt.minute, dt.second))


def timestamp2iso(timestamp):
    "ISO 8601 with millisecond precision and a ``Z`` suffix."
    dt = datetime.datetime.fromtimestamp(timestamp, tz=UTC)
    return '%s.%03dZ' % (dt.strftime('%Y-%m-%dT%H:%M:%S'),
                         dt.microsecond // 1000)


def timestamp2web(timestamp):
    "RFC 1123 date, as used by HTTP headers. Always GMT."
    return formatdate(timestamp, usegmt=True)


_DATE_FORMATTERS = {'clf': timestamp2clf,
                    'iso': timestamp2iso,
                    'web': timestamp2web}


def check_date_style(style):
    if style not in DATE_STYLES:
        raise DateFormatError(style)


def format_date(style, timestamp=None):
    check_date_style(style)
    if timestamp is None:
        timestamp = time.time()
    return _DATE_FORMATTERS[style](timestamp)


class AccessField(object):
    """A field maps a token name to a *getter*, a callable which takes
    an :class:`~organ.exchange.Exchange` and the token's bracketed
    argument (or ``None``) and returns text.

    Args:
        fname (str): The token name, without the leading colon.
        getter (callable): ``getter(exchange, arg) -> str``
        style (callable): Optional, applied to the getter's return
            value when the formatter is in debug mode.
        check_arg (callable): Optional, called with the argument when
            a template is parsed. Raises on invalid arguments.
    """
    def __init__(self, fname, getter, style=None, check_arg=None):
        if not callable(getter):
            raise TypeError('expected callable for getter, not %r' % getter)
        if style is not None and not callable(style):
            raise TypeError('expected callable or None for style,'
                            ' not %r' % style)
        if check_arg is not None and not callable(check_arg):
            raise TypeError('expected callable or None for check_arg,'
                            ' not %r' % check_arg)
        self.fname = fname
        self.getter = getter
        self.style = style
        self.check_arg = check_arg

    def get_value(self, exchange, arg=None):
        return self.getter(exchange, arg)

    def decorate(self, value):
        if self.style is None:
            return value
        return self.style(value)

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.fname)


def _get_date(exchange, style):
    return format_date(style)


def _get_http_version(exchange, arg):
    protocol = exchange.request.protocol or ''
    prefix, sep, version = protocol.partition('HTTP/')
    if not sep or prefix:
        return MISSING_VALUE
    return version


def _get_remote_user(exchange, arg):
    request = exchange.request
    if request.remote_user:
        return request.remote_user
    creds = request.credentials
    return creds.name if creds else MISSING_VALUE


def _response_time_digits(arg):
    try:
        digits = int(arg)
    except (TypeError, ValueError):
        return DEFAULT_RESPONSE_TIME_DIGITS
    if digits < 0 or digits > MAX_RESPONSE_TIME_DIGITS:
        return DEFAULT_RESPONSE_TIME_DIGITS
    return digits


def _get_response_time(exchange, digits):
    msecs = exchange.response.get_response_time()
    if msecs is None:
        return MISSING_VALUE
    return '%.*f' % (_response_time_digits(digits), msecs)


def _get_status(exchange, arg):
    status = exchange.response.status
    if status is None or status == '':
        return MISSING_VALUE
    return str(status)


_STATUS_STYLES = {'2': colors.green,
                  '3': colors.cyan,
                  '4': colors.yellow,
                  '5': colors.red}


def style_status(status_str):
    style = _STATUS_STYLES.get(status_str[:1])
    return style(status_str) if style else status_str


_AF = AccessField
BASIC_FIELDS = [
    _AF('date', _get_date, check_arg=check_date_style),
    _AF('http-version', _get_http_version),
    _AF('method', lambda e, a: e.request.method, style=colors.bold),
    _AF('referrer', lambda e, a: e.request.headers.get('Referer', MISSING_VALUE),
        style=colors.italic),
    _AF('remote-addr', lambda e, a: e.request.remote_addr or MISSING_VALUE),
    _AF('remote-user', _get_remote_user),
    _AF('request', lambda e, a: e.request.headers.get(a, MISSING_VALUE)),
    _AF('response', lambda e, a: e.response.headers.get(a, MISSING_VALUE)),
    _AF('response-time', _get_response_time, style=colors.magenta),
    _AF('status', _get_status, style=style_status),
    _AF('url', lambda e, a: e.request.url, style=colors.gray),
    _AF('user-agent', lambda e, a: e.request.headers.get('User-Agent', ''))]


for f in BASIC_FIELDS:
    register_builtin_field(f)

del f
