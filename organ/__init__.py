# -*- coding: utf-8 -*-

from organ.context import get_context, set_context

from organ.common import (OrganError,
                          DateFormatError,
                          UnknownTokenError,
                          RESPONSE_TIME_HEADER)
from organ.exchange import Headers, Request, Response, Exchange
from organ.fields import AccessField, register_field
from organ.patterns import PRESET_FORMATS, get_format
from organ.formatters import AccessFormatter, render, log_line
from organ.emitters import (StreamEmitter,
                            FileEmitter,
                            AggregateEmitter,
                            LoggingEmitter)
from organ.middleware import AccessLogger, AccessLogMiddleware, organ
