"""
Method Channel - Telegram Forwarder

Minimal command boundary between a host application and a plugin.
The host invokes named methods with an argument dict and receives
exactly one reply per call through a result handle.
"""

import logging
from concurrent.futures import Future
from typing import Any, Callable, Dict, NamedTuple, Optional

logger = logging.getLogger(__name__)


class MethodCall(NamedTuple):
    """A named method invocation with its arguments."""

    method: str
    arguments: Dict[str, Any]

    def argument(self, key: str) -> Any:
        return self.arguments.get(key)


class MethodReply(NamedTuple):
    """Reply delivered to the host for one MethodCall."""

    value: Any = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    error_details: Any = None
    implemented: bool = True

    @property
    def ok(self) -> bool:
        return self.implemented and self.error_code is None


class MethodResult:
    """Result handle passed to a method call handler."""

    def success(self, value: Any = None):
        raise NotImplementedError

    def error(self, code: str, message: Optional[str] = None, details: Any = None):
        raise NotImplementedError

    def not_implemented(self):
        raise NotImplementedError


class FutureResult(MethodResult):
    """
    Result handle backed by a concurrent.futures.Future.

    The first reply wins; later replies are ignored with a warning.
    """

    def __init__(self, method: str = ''):
        self.method = method
        self.future: Future = Future()
        self.future.set_running_or_notify_cancel()

    def _reply(self, reply: MethodReply):
        if self.future.done():
            logger.warning(f"Reply already sent for '{self.method}', ignoring {reply}")
            return
        self.future.set_result(reply)

    def success(self, value: Any = None):
        self._reply(MethodReply(value=value))

    def error(self, code: str, message: Optional[str] = None, details: Any = None):
        self._reply(MethodReply(error_code=code, error_message=message, error_details=details))

    def not_implemented(self):
        self._reply(MethodReply(implemented=False))


class MethodChannel:
    """Named channel routing host calls to one registered handler."""

    def __init__(self, name: str):
        self.name = name
        self._handler: Optional[Callable[[MethodCall, MethodResult], None]] = None

    def set_method_call_handler(self, handler: Optional[Callable[[MethodCall, MethodResult], None]]):
        """Register a handler, or None to detach the current one."""
        self._handler = handler

    def invoke(self, method: str, arguments: Optional[Dict[str, Any]] = None) -> Future:
        """
        Invoke a method on the channel.

        Args:
            method: Method name
            arguments: Method arguments

        Returns:
            Future resolved with the MethodReply
        """
        result = FutureResult(method)

        if self._handler is None:
            logger.warning(f"No handler on channel '{self.name}' for '{method}'")
            result.not_implemented()
            return result.future

        try:
            self._handler(MethodCall(method, dict(arguments or {})), result)
        except Exception as e:
            logger.exception(f"Handler for '{method}' on channel '{self.name}' failed")
            result.error('ERROR', str(e))

        return result.future
