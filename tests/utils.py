import logging
from types import SimpleNamespace

from requests.structures import CaseInsensitiveDict


class _NoLogHandler(logging.Handler):
    """Log handler that asserts if anything is logged."""

    LOGGING_FORMAT = "%(levelname)s: %(message)s"

    def __init__(self, logger):
        logging.Handler.__init__(self)
        self.setFormatter(logging.Formatter(self.LOGGING_FORMAT))
        self.logger = logger

    def __enter__(self):
        self.logger.addHandler(self)

    def __exit__(self, exc_type, exc_value, traceback):
        self.logger.removeHandler(self)

    def emit(self, record):
        message = self.format(record)
        assert False, f"Unexpected logging: {message}"


def no_log(logger):
    """Return a context manager that asserts if anything is emitted
    on the given logger.
    """
    return _NoLogHandler(logger)


class FakeResponse:
    """
    Stands in for the response context manager that Locust returns
    for requests made with C{catch_response=True}.
    """

    def __init__(
        self, text="", status_code=200, headers=None, url="http://localhost/",
        history=(), error=None
    ):
        self.text = text
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.url = url
        self.history = list(history)
        self.request = SimpleNamespace(url=url)
        self.error = error
        self.failures = []
        self.succeeded = False
        self.entered = False

    def failure(self, exc):
        self.failures.append(str(exc))

    def success(self):
        self.succeeded = True

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False


def redirected(response, from_url):
    """Mark C{response} as the result of a redirect from C{from_url}."""
    response.history = [FakeResponse(status_code=302, url=from_url)]
    return response


class FakeClient:
    """
    Stands in for Locust's HTTP session.

    Requests for which no response was registered get an empty
    "200 OK" response.
    """

    def __init__(self, responses):
        self.responses = dict(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        try:
            return self.responses[(method, url)]
        except KeyError:
            return FakeResponse(url=url)

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def urls(self, method="GET"):
        return [url for req_method, url, _ in self.requests if req_method == method]


class FakeUser:
    """Stands in for a Locust C{HttpUser}."""

    def __init__(self, host="http://localhost", responses=()):
        self.host = host
        self.client = FakeClient(responses)
        self.environment = SimpleNamespace(parsed_options=None)
