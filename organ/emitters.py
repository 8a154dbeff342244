# -*- coding: utf-8 -*-
"""Emitters take a rendered access-log entry and write it somewhere:
the console, a file, memory, or a standard library logger.

Every emitter has an ``emit_entry(exchange, entry)`` method (also
available as ``__call__``). One call writes one whole entry. For most
formats that is a single line; for the ``debug`` preset it is a block
of several lines, which is never split across writes.
"""

import io
import os
import sys
import codecs
import logging
from collections import deque

from organ.context import note


CONSOLE_STREAMS = ('stdout', 'stderr')


def check_codec(encoding, errors):
    "Raises :exc:`LookupError` for an unknown codec or error handler."
    codecs.lookup(encoding)
    codecs.lookup_error(errors)


def is_binary_stream(stream):
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.BufferedIOBase, io.RawIOBase)):
        return True
    return 'b' in (getattr(stream, 'mode', None) or '')


class StreamEmitter(object):
    """Writes each entry, followed by *sep*, to a file-like *stream*.

    *stream* defaults to ``"stdout"``; ``"stderr"`` is also accepted.
    These two names are looked up on :mod:`sys` at every write, so
    ``contextlib.redirect_stdout``, doctest, and notebook kernels see
    the output.

    Text streams receive the entry as-is. Binary streams receive it
    encoded with *encoding* (UTF-8 by default) and *errors*
    (``"backslashreplace"`` by default).
    """
    def __init__(self, stream='stdout', **kwargs):
        self.encoding = kwargs.pop('encoding', None) or 'utf-8'
        self.errors = kwargs.pop('errors', 'backslashreplace')
        self.sep = kwargs.pop('sep', '\n')
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r'
                            % list(kwargs.keys()))
        check_codec(self.encoding, self.errors)
        if not isinstance(self.sep, str):
            raise TypeError('expected str separator, not: %r' % (self.sep,))

        if stream in CONSOLE_STREAMS:
            self.console = stream
            self._stream = None
        elif callable(getattr(stream, 'write', None)):
            self.console = None
            self._stream = stream
        else:
            raise TypeError('%s expected a writable stream, or "stdout"'
                            ' or "stderr", not: %r'
                            % (self.__class__.__name__, stream))

    @property
    def stream(self):
        if self.console:
            return getattr(sys, self.console)
        return self._stream

    def emit_entry(self, exchange, entry):
        stream = self.stream
        data = entry + self.sep
        try:
            if is_binary_stream(stream):
                data = data.encode(self.encoding, self.errors)
            stream.write(data)
            flush = getattr(stream, 'flush', None)
            if callable(flush):
                flush()
        except Exception as e:
            note('stream_emit', 'got %r on %r.emit_entry()', e, self)

    __call__ = emit_entry

    def __repr__(self):
        target = self.console or self._stream
        return '<%s stream=%r>' % (self.__class__.__name__, target)


class FileEmitter(StreamEmitter):
    """Appends entries to the file at *path*, or truncates it first
    with ``overwrite=True``. Takes the same keyword arguments as
    :class:`StreamEmitter`.
    """
    def __init__(self, path, **kwargs):
        self.path = os.path.abspath(path)
        mode = 'wb' if kwargs.pop('overwrite', False) else 'ab'
        stream = open(self.path, mode)
        try:
            super(FileEmitter, self).__init__(stream, **kwargs)
        except Exception:
            stream.close()
            raise

    def close(self):
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.close()
        except Exception as e:
            note('file_close', 'got %r on %r.close()', e, self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return '<%s path=%r>' % (self.__class__.__name__, self.path)


class AggregateEmitter(object):
    """Keeps ``(exchange, entry)`` records in memory, the most recent
    *limit* of them if a limit is set. Handy in tests.
    """
    def __init__(self, limit=None):
        self.limit = limit
        self.records = deque(maxlen=limit)

    def get_entries(self):
        return [entry for _, entry in self.records]

    def get_entry(self, idx):
        return self.records[idx][1]

    def get_exchanges(self):
        return [exchange for exchange, _ in self.records]

    def clear(self):
        self.records.clear()

    def emit_entry(self, exchange, entry):
        self.records.append((exchange, entry))

    __call__ = emit_entry

    def __len__(self):
        return len(self.records)

    def __repr__(self):
        return ('<%s limit=%r entry_count=%r>'
                % (self.__class__.__name__, self.limit, len(self.records)))


class LoggingEmitter(object):
    """Hands entries to a standard library :class:`logging.Logger`, by
    default one named ``"organ"`` at the INFO level, for applications
    that already route their output through :mod:`logging`.
    """
    def __init__(self, logger=None, level=logging.INFO):
        if logger is None or isinstance(logger, str):
            logger = logging.getLogger(logger or 'organ')
        self.logger = logger
        self.level = level

    def emit_entry(self, exchange, entry):
        self.logger.log(self.level, entry)

    __call__ = emit_entry

    def __repr__(self):
        return ('<%s logger=%r level=%r>'
                % (self.__class__.__name__, self.logger.name, self.level))
