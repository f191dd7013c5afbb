"""
Logging and exception utils.
"""

import logging
import traceback
from typing import Optional

from django.conf import settings

logger = logging.getLogger("app")


def print_error(print_in_tests=False, exc: Optional[Exception] = None):
    """
    Log an error with stacktrace that's been handled via try/except.

    If ``exc`` is given its traceback is logged, otherwise the exception
    currently being handled.
    """

    if settings.TESTING and not print_in_tests:
        return

    if exc is not None:
        tb = "".join(traceback.format_exception(exc))
    else:
        tb = traceback.format_exc()

    logger.warning(tb)
