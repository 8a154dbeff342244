# -*- coding: utf-8 -*-


class OrganContext(object):
    def __init__(self, **kwargs):
        self.note_handlers = list(kwargs.pop('note_handlers', None) or [])
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r'
                            % list(kwargs.keys()))

    def note(self, name, message, *a, **kw):
        """An access logger shouldn't take down the application it is
        logging for, and it can't log through itself either. This is a
        hook for recording all of those error conditions that need to
        be robustly ignored, such as a closed log stream or a line
        that failed to render.
        """
        if not self.note_handlers:
            return
        if a:
            try:
                message = message % a
            except Exception:
                pass
        for nh in self.note_handlers:
            nh(name, message)
        return

    def add_note_handler(self, handler):
        if not callable(handler):
            raise TypeError('expected callable note handler, not %r'
                            % handler)
        if handler not in self.note_handlers:
            self.note_handlers.append(handler)

    def remove_note_handler(self, handler):
        try:
            self.note_handlers.remove(handler)
        except ValueError:
            pass


# the process-wide context, swapped out by set_context()
_current = [OrganContext()]


def get_context():
    return _current[0]


def set_context(context):
    """Route all :func:`note` calls to *context*, an
    :class:`OrganContext`, and return it.
    """
    if not callable(getattr(context, 'note', None)):
        raise TypeError('expected a context with a note() method, not %r'
                        % (context,))
    _current[0] = context
    return context


def note(name, message, *a, **kw):
    return get_context().note(name, message, *a, **kw)
