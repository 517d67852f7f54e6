"""Instrumentation for calls to external collaborators such as the weather API."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from kikonasu_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

# Keyword arguments shown in call_started events; the rest are counted.
PREVIEW_KEYS = 6


def _validated_kwargs(call_name: str, input_model: type[BaseModel], kwargs: dict) -> dict:
    try:
        return input_model.model_validate(kwargs).model_dump(exclude_unset=True)
    except ValidationError as exc:
        log_event(
            LOGGER,
            logging.WARNING,
            "call_validation_failed",
            call=call_name,
            errors=[error.get("msg") for error in exc.errors()],
        )
        raise ValueError(f"Invalid input for {call_name}: {exc}") from exc


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_call(
    call_name: str,
    input_model: type[BaseModel] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Run a collaborator call as a named operation with start/complete/fail events.

    When ``input_model`` is given, keyword arguments are validated against it
    and a failure is re-raised as ``ValueError`` before the call is made.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with operation_context(f"call:{call_name}"):
                if input_model is not None:
                    kwargs = _validated_kwargs(call_name, input_model, kwargs)

                shown = dict(list(kwargs.items())[:PREVIEW_KEYS])
                log_event(
                    LOGGER,
                    logging.INFO,
                    "call_started",
                    call=call_name,
                    kwargs=shown,
                    hidden_kwargs=max(len(kwargs) - PREVIEW_KEYS, 0),
                )
                start = time.perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "call_failed",
                        call=call_name,
                        duration_ms=_elapsed_ms(start),
                        exc_info=True,
                    )
                    raise
                log_event(LOGGER, logging.INFO, "call_completed", call=call_name, duration_ms=_elapsed_ms(start))
                return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
