# -*- coding: utf-8 -*-
"""Middleware for logging requests as they go through an application.

:class:`AccessLogger` holds the configuration and does the timing
work. It can drive a plain handler function, or be attached to a WSGI
application with :meth:`AccessLogger.wrap_wsgi`:

>>> from organ import organ
>>> def app(environ, start_response):
...     start_response('200 OK', [('Content-Type', 'text/plain')])
...     return [b'hi']
>>> app = organ('tiny').wrap_wsgi(app)
"""

import time

from organ.context import note
from organ.common import DEFAULT_FORMAT
from organ.exchange import Exchange
from organ.emitters import StreamEmitter
from organ.formatters import AccessFormatter


__all__ = ['AccessLogger', 'AccessLogMiddleware', 'organ']


class AccessLogger(object):
    """Times a unit of work and emits one access-log line for it.

    Args:
        fmt (str): Preset name or template, see
            :class:`~organ.formatters.AccessFormatter`. Defaults to
            ``"combined"``.
        debug (bool): Style values for terminal output.
        emitter: Where rendered lines go, any object with an
            ``emit_entry(exchange, entry)`` method. Defaults to a
            :class:`~organ.emitters.StreamEmitter` on stdout.
        strict (bool): Reject unknown tokens at construction.
        extra_fields (list): Additional fields for the formatter.
        reraise (bool): Propagate exceptions raised while rendering or
            emitting. Defaults to ``False``, in which case they are
            reported through :func:`organ.context.note` and the line
            is dropped.

    Format problems, such as an unsupported ``:date`` style, raise
    here, at construction.
    """
    def __init__(self, fmt=DEFAULT_FORMAT, **kwargs):
        debug = kwargs.pop('debug', False)
        strict = kwargs.pop('strict', False)
        extra_fields = kwargs.pop('extra_fields', None)
        emitter = kwargs.pop('emitter', None)
        self.reraise = kwargs.pop('reraise', False)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r'
                            % list(kwargs.keys()))
        self.formatter = AccessFormatter(fmt or DEFAULT_FORMAT, debug=debug,
                                         strict=strict,
                                         extra_fields=extra_fields)
        if emitter is None:
            emitter = StreamEmitter('stdout')
        if not callable(getattr(emitter, 'emit_entry', None)):
            raise TypeError('expected emitter with emit_entry() method,'
                            ' not %r' % emitter)
        self.emitter = emitter

    def __call__(self, exchange, next_handler):
        """Call ``next_handler(exchange)``, then log the exchange along
        with the time the handler took. Exceptions from the handler
        propagate and nothing is logged for that exchange.
        """
        start_time = time.time()
        ret = next_handler(exchange)
        self.finish(exchange, start_time)
        return ret

    def finish(self, exchange, start_time, end_time=None):
        if end_time is None:
            end_time = time.time()
        msecs = (end_time - start_time) * 1000.0
        exchange.response.set_response_time(msecs)
        return self.log(exchange)

    def log(self, exchange):
        try:
            entry = self.formatter(exchange)
            self.emitter.emit_entry(exchange, entry)
        except Exception as e:
            if self.reraise:
                raise
            note('access_log', 'got %r logging %r', e, exchange)
            return None
        return entry

    def wrap_wsgi(self, application):
        return AccessLogMiddleware(application, access_logger=self)

    def __repr__(self):
        return ('<%s formatter=%r emitter=%r>'
                % (self.__class__.__name__, self.formatter, self.emitter))


class AccessLogMiddleware(object):
    """WSGI middleware which logs every request that goes through
    *application*. Pass an :class:`AccessLogger` as *access_logger*,
    or the keyword arguments to create one.

    The response time is measured until the application returns its
    response iterable. Applications which only call
    ``start_response`` once their iterable is consumed are logged
    when the server closes the iterable, so that the status is known.
    """
    def __init__(self, application, access_logger=None, **kwargs):
        if access_logger is None:
            access_logger = AccessLogger(**kwargs)
        elif kwargs:
            raise TypeError('unexpected keyword arguments alongside'
                            ' access_logger: %r' % list(kwargs.keys()))
        self.application = application
        self.access_logger = access_logger

    def __call__(self, environ, start_response):
        start_time = time.time()
        exchange = Exchange.from_environ(environ)
        started = []

        def replacement_start_response(status, headers, exc_info=None):
            exchange.response.set_wsgi_status(status, headers)
            started.append(status)
            if exc_info is None:
                return start_response(status, headers)
            return start_response(status, headers, exc_info)

        app_iter = self.application(environ, replacement_start_response)
        if started:
            try:
                self.access_logger.finish(exchange, start_time)
            except Exception:
                # the server never sees app_iter, so close it here
                app_close = getattr(app_iter, 'close', None)
                if callable(app_close):
                    app_close()
                raise
            return app_iter
        return _LogOnClose(app_iter, self.access_logger, exchange, start_time)

    def __repr__(self):
        return ('<%s application=%r access_logger=%r>'
                % (self.__class__.__name__, self.application,
                   self.access_logger))


class _LogOnClose(object):
    def __init__(self, app_iter, access_logger, exchange, start_time):
        self.app_iter = app_iter
        self.access_logger = access_logger
        self.exchange = exchange
        self.start_time = start_time
        self._logged = False

    def __iter__(self):
        return iter(self.app_iter)

    def close(self):
        try:
            app_close = getattr(self.app_iter, 'close', None)
            if callable(app_close):
                app_close()
        finally:
            if not self._logged:
                self._logged = True
                self.access_logger.finish(self.exchange, self.start_time)


def organ(fmt=DEFAULT_FORMAT, debug=False, **kwargs):
    """Create an :class:`AccessLogger`, the middleware factory. Takes
    the same keyword arguments as :class:`AccessLogger`.

    >>> log_access = organ('dev')
    """
    return AccessLogger(fmt, debug=debug, **kwargs)
