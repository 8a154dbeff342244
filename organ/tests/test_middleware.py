# -*- coding: utf-8 -*-

import pytest

from organ import organ
from organ.common import DateFormatError
from organ.context import OrganContext, get_context, set_context
from organ.emitters import AggregateEmitter
from organ.exchange import Exchange, Request, Response
from organ.fields import AccessField
from organ.middleware import AccessLogger, AccessLogMiddleware


ENVIRON = {'REQUEST_METHOD': 'GET',
           'PATH_INFO': '/health',
           'SERVER_PROTOCOL': 'HTTP/1.1',
           'REMOTE_ADDR': '127.0.0.1'}


def hello_app(environ, start_response):
    start_response('200 OK', [('Content-Type', 'text/plain'),
                              ('Content-Length', '5')])
    return [b'hello']


def lazy_app(environ, start_response):
    start_response('201 Created', [('Content-Length', '3')])
    yield b'new'


class _Closing(object):
    closed = False

    def __init__(self, chunks):
        self.chunks = chunks

    def __iter__(self):
        return iter(self.chunks)

    def close(self):
        self.closed = True


def _call_wsgi(app, environ=ENVIRON):
    started = []

    def start_response(status, headers, exc_info=None):
        started.append((status, headers))

    app_iter = app(dict(environ), start_response)
    body = b''.join(app_iter)
    if hasattr(app_iter, 'close'):
        app_iter.close()
    return started, body


def _noting_context():
    ctx = OrganContext()
    notes = []
    ctx.add_note_handler(lambda name, message: notes.append((name, message)))
    return ctx, notes


def test_factory_defaults():
    emtr = AggregateEmitter()
    access_log = organ(emitter=emtr)
    assert access_log.formatter.raw_format_str == 'combined'
    assert not access_log.formatter.debug
    assert organ('debug', emitter=emtr).formatter.debug
    assert organ('tiny', debug=True, emitter=emtr).formatter.debug
    assert 'AccessFormatter' in repr(access_log)


def test_handler_timing():
    emtr = AggregateEmitter()
    access_log = organ(':method :status :response-time[0]', emitter=emtr)
    exchange = Exchange(Request('GET', '/'))

    def handler(exchange):
        exchange.response.status = 204
        return 'done'

    assert access_log(exchange, handler) == 'done'
    assert exchange.response.get_response_time() >= 0
    assert emtr.get_entries() == ['GET 204 0']


def test_handler_exception_not_logged():
    emtr = AggregateEmitter()
    access_log = organ('tiny', emitter=emtr)

    def handler(exchange):
        raise ValueError('handler blew up')

    with pytest.raises(ValueError):
        access_log(Exchange(Request('GET', '/')), handler)
    assert not emtr.get_entries()


def test_finish_elapsed():
    emtr = AggregateEmitter()
    access_log = AccessLogger(':response-time ms', emitter=emtr)
    exchange = Exchange(Request('GET', '/'), Response(200))
    entry = access_log.finish(exchange, 10.0, end_time=10.012345)
    assert entry == '12.345 ms'
    assert emtr.get_entry(-1) == '12.345 ms'


def test_bad_config():
    with pytest.raises(DateFormatError):
        organ(':date[bogus]', emitter=AggregateEmitter())
    with pytest.raises(TypeError):
        organ('tiny', emitter=AggregateEmitter(), colour=True)
    with pytest.raises(TypeError):
        organ('tiny', emitter=object())


def test_render_failure_noted():
    def broken(exchange, arg):
        raise RuntimeError('no way')

    ctx, notes = _noting_context()
    prev_ctx = get_context()
    set_context(ctx)
    try:
        emtr = AggregateEmitter()
        access_log = organ(':broken', emitter=emtr,
                           extra_fields=[AccessField('broken', broken)])
        assert access_log(Exchange(Request('GET', '/')), lambda e: 'ok') == 'ok'
    finally:
        set_context(prev_ctx)
    assert not emtr.get_entries()
    assert notes and notes[0][0] == 'access_log'

    access_log = organ(':broken', emitter=emtr, reraise=True,
                       extra_fields=[AccessField('broken', broken)])
    with pytest.raises(RuntimeError):
        access_log(Exchange(Request('GET', '/')), lambda e: 'ok')


def test_wsgi_middleware():
    emtr = AggregateEmitter()
    app = organ('tiny', emitter=emtr).wrap_wsgi(hello_app)
    assert isinstance(app, AccessLogMiddleware)

    started, body = _call_wsgi(app)
    assert body == b'hello'
    assert started[0][0] == '200 OK'
    # the elapsed time stays off the wire
    assert all(name != 'X-Response-Time' for name, _ in started[0][1])

    entry = emtr.get_entry(-1)
    assert entry.startswith('GET /health 200 5 - ')
    assert entry.endswith(' ms')


def test_wsgi_middleware_kwargs():
    emtr = AggregateEmitter()
    app = AccessLogMiddleware(hello_app, fmt='common', emitter=emtr)
    _call_wsgi(app, dict(ENVIRON, HTTP_AUTHORIZATION='Basic ZnJhbms6'))
    entry = emtr.get_entry(-1)
    assert entry.startswith('127.0.0.1 - frank [')
    assert entry.endswith('] "GET /health HTTP/1.1" 200 5')

    with pytest.raises(TypeError):
        AccessLogMiddleware(hello_app, organ(emitter=emtr), fmt='tiny')


def test_wsgi_lazy_start_response():
    emtr = AggregateEmitter()
    app = organ(':status :response[content-length]', emitter=emtr).wrap_wsgi(lazy_app)
    started, body = _call_wsgi(app)
    assert body == b'new'
    assert started[0][0] == '201 Created'
    assert emtr.get_entries() == ['201 3']


def test_wsgi_close_passthrough():
    emtr = AggregateEmitter()
    inner = _Closing([b'a', b'b'])

    def app(environ, start_response):
        return inner

    wrapped = organ(':status', emitter=emtr).wrap_wsgi(app)
    app_iter = wrapped(dict(ENVIRON), lambda status, headers: None)
    assert b''.join(app_iter) == b'ab'
    app_iter.close()
    app_iter.close()
    assert inner.closed
    assert emtr.get_entries() == ['-']


def test_wsgi_log_failure_closes_iterable():
    def broken(exchange, arg):
        raise RuntimeError('no way')

    inner = _Closing([b'body'])

    def app(environ, start_response):
        start_response('200 OK', [])
        return inner

    access_log = organ(':broken', emitter=AggregateEmitter(), reraise=True,
                       extra_fields=[AccessField('broken', broken)])
    wrapped = access_log.wrap_wsgi(app)
    with pytest.raises(RuntimeError):
        wrapped(dict(ENVIRON), lambda status, headers: None)
    assert inner.closed
