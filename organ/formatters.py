# -*- coding: utf-8 -*-
"""Implements types and functions for rendering
:class:`~organ.exchange.Exchange` instances into access-log lines.
"""

import re
from collections import namedtuple

from organ.common import UnknownTokenError
from organ.fields import FIELD_MAP, BUILTIN_FIELD_MAP
from organ.emitters import StreamEmitter
from organ.patterns import get_format


__all__ = ['AccessFormatter', 'AccessToken', 'tokenize_format_str',
           'render', 'log_line']


_token_re = re.compile(r':([a-z\-]+)(?:\[([a-zA-Z0-9\-]*)\])?')


AccessToken = namedtuple('AccessToken', 'text name arg')


def tokenize_format_str(fstr):
    """Split a format string into a list of literal strings and
    :class:`AccessToken` instances, in order. Token names are matched
    greedily, so ``:response-time`` is never read as ``:response``.

    >>> tokenize_format_str(':url!')
    [AccessToken(text=':url', name='url', arg=None), '!']
    """
    ret, prev_end = [], 0
    for match in _token_re.finditer(fstr):
        start, end = match.start(), match.end()
        if prev_end < start:
            ret.append(fstr[prev_end:start])
        prev_end = end
        ret.append(AccessToken(match.group(), match.group(1), match.group(2)))
    if prev_end < len(fstr):
        ret.append(fstr[prev_end:])
    return ret


class AccessFormatter(object):
    """The ``AccessFormatter`` implements a small templating system
    for rendering an :class:`~organ.exchange.Exchange` into a single
    string, based on :class:`AccessFields <organ.fields.AccessField>`.

    Args:
        format_str (str): Either the name of a preset (``"combined"``,
            ``"common"``, ``"dev"``, ``"short"``, ``"tiny"``,
            ``"debug"``), or a template such as ``":method :url"``.
        debug (bool): Style some values with ANSI escape codes, for
            terminals. Always on for the ``"debug"`` preset.
        strict (bool): Raise :exc:`~organ.common.UnknownTokenError` for
            tokens with no matching field, instead of leaving them
            in the output as-is.
        extra_fields (list): Optionally specify fields this formatter
            should recognize in addition to the registered ones.

    Templates are parsed once, at construction, and token arguments
    are validated then too, so that a bad ``:date`` style raises
    :exc:`~organ.common.DateFormatError` before any request is
    served.

    >>> from organ.exchange import Exchange, Request, Response
    >>> fmtr = AccessFormatter(':method :url :status')
    >>> fmtr(Exchange(Request('GET', '/'), Response(200)))
    'GET / 200'
    """
    def __init__(self, format_str, **kwargs):
        debug = kwargs.pop('debug', False)
        strict = kwargs.pop('strict', False)
        extra_fields = kwargs.pop('extra_fields', None)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r'
                            % list(kwargs.keys()))

        self._field_map = dict(BUILTIN_FIELD_MAP)
        self._field_map.update(FIELD_MAP)
        if extra_fields:
            self._field_map.update([(f.fname, f) for f in extra_fields])

        self.raw_format_str = format_str
        self.format_str, force_debug = get_format(format_str)
        self.debug = bool(debug or force_debug)
        self.strict = strict

        self.segments = tokenize_format_str(self.format_str)
        self.tokens, seen = [], set()
        for token in self.segments:
            if not isinstance(token, AccessToken) or token.text in seen:
                continue
            seen.add(token.text)
            field = self._field_map.get(token.name)
            if field is None:
                if strict:
                    raise UnknownTokenError(token.text)
                # unknown tokens are passed through as literal text
                continue
            if field.check_arg:
                field.check_arg(token.arg)
            self.tokens.append(token)
        return

    def __repr__(self):
        return '%s(%r, debug=%r)' % (self.__class__.__name__,
                                     self.raw_format_str, self.debug)

    def resolve(self, exchange):
        """Resolve each distinct token in the template exactly once,
        returning a map of token text to plain (unstyled) value.
        Exceptions raised by fields are not caught here.
        """
        ret = {}
        for token in self.tokens:
            field = self._field_map[token.name]
            value = field.get_value(exchange, token.arg)
            ret[token.text] = '' if value is None else str(value)
        return ret

    def format(self, exchange):
        "Render *exchange* into text, according to the template."
        values = self.resolve(exchange)
        if self.debug:
            for token in self.tokens:
                field = self._field_map[token.name]
                values[token.text] = field.decorate(values[token.text])
        ret = []
        for seg in self.segments:
            if isinstance(seg, AccessToken):
                ret.append(values.get(seg.text, seg.text))
            else:
                ret.append(seg)
        return ''.join(ret)

    __call__ = format


def render(format_str, exchange, debug=False, **kwargs):
    """Render *exchange* with a one-off :class:`AccessFormatter`. Takes
    the same keyword arguments. For repeated use, create the
    formatter once instead."""
    return AccessFormatter(format_str, debug=debug, **kwargs)(exchange)


def log_line(format_str, exchange, debug=False, emitter=None):
    """Render *exchange* and emit the result, by default to stdout, one
    entry per call."""
    entry = render(format_str, exchange, debug=debug)
    if emitter is None:
        emitter = StreamEmitter('stdout')
    emitter.emit_entry(exchange, entry)
    return entry
