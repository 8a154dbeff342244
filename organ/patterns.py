# -*- coding: utf-8 -*-
"""\
Named format presets. Most follow existing standards or widely-used
implementations:

Apache/NCSA combined log:

  127.0.0.1 - frank [10/Oct/2000:13:55:36 +00:00] "GET /apache_pb.gif HTTP/1.0" 200 2326 "http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"

Common Log Format (CLF) drops the referrer and user agent:

  127.0.0.1 - frank [10/Oct/2000:13:55:36 +00:00] "GET /apache_pb.gif HTTP/1.0" 200 2326

The ``dev``, ``short``, and ``tiny`` formats are terser single-line
variants for development. ``debug`` is a multi-line block with one
field per line. Selecting it by name also turns on debug-mode styling.
"""

from organ.common import DEBUG_FORMAT


COMBINED = (':remote-addr - :remote-user [:date[clf]]'
            ' ":method :url HTTP/:http-version" :status'
            ' :response[content-length] ":referrer" ":user-agent"')

COMMON = (':remote-addr - :remote-user [:date[clf]]'
          ' ":method :url HTTP/:http-version" :status'
          ' :response[content-length]')

DEV = ':method :url :status :response-time ms - :response[content-length]'

SHORT = (':remote-addr :remote-user :method :url HTTP/:http-version'
         ' :status :response[content-length] - :response-time ms')

TINY = ':method :url :status :response[content-length] - :response-time ms'

DEBUG = ('METHOD:         :method\n'
         'URL:            :url\n'
         'STATUS:         :status\n'
         'DATE:           :date[web]\n'
         'RESPONSE_TIME:  :response-time ms\n'
         'CONTENT_LENGTH: :response[content-length]\n'
         'HTTP_VERSION:   :http-version\n'
         'REMOTE_ADDR:    :remote-addr\n'
         'REMOTE_USER:    :remote-user\n'
         'REFERER:        :referrer\n'
         'USER_AGENT:     :user-agent\n')


PRESET_FORMATS = {'combined': COMBINED,
                  'common': COMMON,
                  'dev': DEV,
                  'short': SHORT,
                  'tiny': TINY,
                  DEBUG_FORMAT: DEBUG}


def get_format(fmt):
    """Expand a preset name into its template. Returns a tuple of the
    template and whether debug mode is forced on, which is only the
    case for the ``debug`` preset. Anything that is not a preset name
    is returned unchanged as a template.
    """
    force_debug = fmt == DEBUG_FORMAT
    return PRESET_FORMATS.get(fmt, fmt), force_debug
