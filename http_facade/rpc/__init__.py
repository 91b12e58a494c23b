"""Remote-call invocation with envelope unwrapping."""

from http_facade.rpc.invoker import (
    EXCEPTION_RULES,
    ExceptionRule,
    invoke_remote,
    map_exception,
    parse_remote_message,
)


__all__ = [
    "EXCEPTION_RULES",
    "ExceptionRule",
    "invoke_remote",
    "map_exception",
    "parse_remote_message",
]
