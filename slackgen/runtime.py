"""Runtime support for generated bindings.

Generated modules import from here: the :class:`RequestSender` protocol every
generated callable sends through, the :class:`ClientError` a sender raises
when the exchange fails, and the bases of the per-method error families.

Example:
    >>> from slackgen.runtime import HttpxRequestSender
    >>> from myclient.chat import PostMessageRequest, post_message
    >>>
    >>> sender = HttpxRequestSender(token='xoxb-...')
    >>> response = post_message(sender, PostMessageRequest(channel='C1', text='hi'))
"""

import logging
from typing import Protocol, runtime_checkable

import httpx

__all__ = [
    'ClientError',
    'RequestSender',
    'HttpxRequestSender',
    'MethodError',
    'MalformedResponseError',
    'UnknownApiError',
    'ClientFailure',
]

logger = logging.getLogger(__name__)

SLACK_API_URL = 'https://slack.com/api/'


class ClientError(Exception):
    """The request could not be sent or its response could not be read."""

    @property
    def description(self) -> str:
        return str(self.args[0]) if self.args else type(self).__name__


@runtime_checkable
class RequestSender(Protocol):
    """Sends one API call and returns the raw response body."""

    def send(self, method: str, params: dict[str, str]) -> str:
        """Call ``method`` with ``params``.

        Raises:
            ClientError: If the exchange with the server failed.
        """
        ...


class HttpxRequestSender:
    """A :class:`RequestSender` issuing GET requests with httpx.

    Args:
        base_url: Prefix the method name is appended to.
        token: Sent as the ``token`` parameter of every call when given.
        client: The httpx client to use; one is created when omitted.
    """

    def __init__(
        self,
        base_url: str = SLACK_API_URL,
        token: str | None = None,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url
        self.token = token
        self._client = client or httpx.Client()

    def send(self, method: str, params: dict[str, str]) -> str:
        if self.token is not None:
            params = {**params, 'token': self.token}

        url = f'{self.base_url}{method}'
        logger.debug(f'Calling {url}')
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ClientError(f'{method}: {e}') from e
        return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> 'HttpxRequestSender':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MethodError(Exception):
    """Base class of every generated per-method error.

    Attributes:
        code: The wire error code, for errors the server reported.
    """

    code: str | None = None

    @property
    def description(self) -> str:
        return self.code or type(self).__name__

    @property
    def cause(self) -> BaseException | None:
        """The error that caused this one; only transport failures have one."""
        return None

    def __str__(self) -> str:
        return self.description


class MalformedResponseError(MethodError):
    """The response was not "ok" but provided no recognizable error."""

    @property
    def description(self) -> str:
        return 'Malformed response data from Slack.'


class UnknownApiError(MethodError):
    """The response reported an error code the method does not declare."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class ClientFailure(MethodError):
    """The request could not be completed by the :class:`RequestSender`."""

    def __init__(self, error: ClientError):
        super().__init__(error)
        self.error = error
        self.__cause__ = error

    @property
    def description(self) -> str:
        return self.error.description

    @property
    def cause(self) -> BaseException | None:
        return self.error
