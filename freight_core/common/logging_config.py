"""
Logging configuration with request ID support
"""
import logging
import threading

_local = threading.local()


def set_current_request_id(request_id):
    _local.request_id = request_id


def clear_current_request_id():
    try:
        del _local.request_id
    except AttributeError:
        pass


def get_current_request_id():
    return getattr(_local, "request_id", None)


class RequestIDFilter(logging.Filter):
    """
    Adds `request_id` to every record so formatters can print it.
    Outside a request (management commands, tests) it is "N/A".
    """

    def filter(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = get_current_request_id() or "N/A"
        return True
