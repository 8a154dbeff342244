# -*- coding: utf-8 -*-
"""ANSI terminal styling for debug-mode output. Each helper wraps text
in an opening and a closing escape sequence, so that styles can nest
without resetting one another.
"""

import re


_ANSI_RE = re.compile('\x1b\\[[0-9;]*m')


def _make_style(open_code, close_code):
    open_seq, close_seq = '\x1b[%sm' % open_code, '\x1b[%sm' % close_code

    def style(text):
        return '%s%s%s' % (open_seq, text, close_seq)
    return style


bold = _make_style(1, 22)
italic = _make_style(3, 23)
red = _make_style(31, 39)
green = _make_style(32, 39)
yellow = _make_style(33, 39)
magenta = _make_style(35, 39)
cyan = _make_style(36, 39)
gray = _make_style(90, 39)


def strip_styles(text):
    return _ANSI_RE.sub('', text)
