"""Business-result gate: turns failed envelopes into BusinessError.

Decoupled from the rest client; composes onto any awaitable that yields
an envelope.
"""

from collections.abc import Awaitable
from typing import TypeVar

import structlog

from http_facade.errors import BusinessError, CommonErrorCode
from http_facade.rest.metrics import RestMetrics
from http_facade.rest.models import FailureKind
from http_facade.rest.state_machine import RequestState, RequestStateMachine
from http_facade.result.models import Envelope


logger = structlog.get_logger()

EnvelopeT = TypeVar("EnvelopeT", bound=Envelope)


def check_success(envelope: EnvelopeT) -> EnvelopeT:
    """Return the envelope unchanged if it reports success.

    Args:
        envelope: Decoded envelope.

    Returns:
        The same envelope object.

    Raises:
        BusinessError: Built from the envelope's code and description.
    """
    if envelope.success:
        return envelope
    if envelope.code is None or envelope.code == "":
        raise BusinessError(
            CommonErrorCode.REMOTE_SERVICE.with_message(envelope.description or "")
        )
    raise BusinessError.of(envelope.code, envelope.description)


async def ensure_success(
    pending: Awaitable[EnvelopeT],
    lifecycle: RequestStateMachine | None = None,
) -> EnvelopeT:
    """Await an envelope and reject it if it reports failure.

    Errors raised while awaiting ``pending`` propagate unchanged.

    Args:
        pending: Awaitable yielding an envelope.
        lifecycle: Optional state machine of the call that produced it.

    Returns:
        The same envelope object when it reports success.

    Raises:
        BusinessError: When the envelope reports failure.
    """
    envelope = await pending
    try:
        check_success(envelope)
    except BusinessError as exc:
        RestMetrics.get_instance().record_failure(FailureKind.BUSINESS)
        logger.debug(
            "business_result_failed",
            component="rest",
            code=exc.code,
            description=exc.message,
        )
        if lifecycle is not None:
            lifecycle.transition(RequestState.GATE_ERROR)
        raise

    if lifecycle is not None:
        lifecycle.transition(RequestState.GATE_SUCCESS)
    return envelope
