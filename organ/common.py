# -*- coding: utf-8 -*-


DEFAULT_FORMAT = 'combined'
DEBUG_FORMAT = 'debug'
RESPONSE_TIME_HEADER = 'X-Response-Time'
DATE_STYLES = ('clf', 'iso', 'web')
MISSING_VALUE = '-'


class OrganError(Exception):
    pass


class DateFormatError(OrganError, ValueError):
    """Raised when a ``:date`` token carries a style other than one of
    ``clf``, ``iso``, or ``web``.
    """
    def __init__(self, style):
        self.style = style
        msg = ('unsupported date format: %r (expected one of %s)'
               % (style, ', '.join(DATE_STYLES)))
        super(DateFormatError, self).__init__(msg)


class UnknownTokenError(OrganError, ValueError):
    "Only raised by formatters created with ``strict=True``."
    def __init__(self, token):
        self.token = token
        super(UnknownTokenError, self).__init__('unrecognized token: %r'
                                                % (token,))
