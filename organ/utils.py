# -*- coding: utf-8 -*-

import re
import base64
import binascii
from collections import namedtuple


Credentials = namedtuple('Credentials', 'name password')

_BASIC_AUTH_RE = re.compile(r'^ *(?:[Bb][Aa][Ss][Ii][Cc]) +([A-Za-z0-9._~+/-]+=*) *$')
_USER_PASS_RE = re.compile(r'^([^:]*):(.*)$', re.DOTALL)


def parse_basic_auth(header_value):
    """Extract :class:`Credentials` from the value of an HTTP
    ``Authorization`` header using the Basic scheme. Returns ``None``
    for a missing, malformed, or non-Basic header.

    >>> parse_basic_auth('Basic YWxhZGRpbjpvcGVuc2VzYW1l')
    Credentials(name='aladdin', password='opensesame')
    """
    if not header_value:
        return None
    match = _BASIC_AUTH_RE.match(header_value)
    if not match:
        return None
    try:
        decoded = base64.b64decode(match.group(1))
    except (binascii.Error, ValueError):
        return None
    user_pass = _USER_PASS_RE.match(decoded.decode('utf-8', 'replace'))
    if not user_pass:
        return None
    return Credentials(*user_pass.groups())
