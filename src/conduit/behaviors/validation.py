# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: conduit
"""
ValidationBehavior: rejects invalid requests before they reach the handler.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from conduit.mediator.contracts import PipelineBehavior, TRequest, TResponse
from conduit.mediator.errors import RequestValidationError

if TYPE_CHECKING:
    from conduit.mediator.cancellation import CancellationToken
    from conduit.mediator.contracts import NextHandler


class ValidationBehavior(PipelineBehavior[TRequest, TResponse]):
    """
    Calls ``request.validate()`` when the request defines one.

    ``validate`` may be a plain or a coroutine method. It rejects the request
    by raising ``ValueError`` (pydantic's ``ValidationError`` included) or by
    returning ``False``; either way a ``RequestValidationError`` is raised and
    the rest of the pipeline does not run. Requests without ``validate`` pass
    straight through, as do pydantic models that only inherit
    ``BaseModel.validate``.
    """

    async def handle(
        self,
        request: TRequest,
        cancellation: CancellationToken,
        next_handler: NextHandler[TResponse],
    ) -> TResponse:
        validate = _find_validate(request)
        if validate is not None:
            try:
                valid = validate()
                if inspect.isawaitable(valid):
                    valid = await valid
            except RequestValidationError:
                raise
            except ValueError as e:
                raise RequestValidationError(type(request), _messages(e)) from e
            if valid is False:
                raise RequestValidationError(type(request), ["validate() returned False"])
        return await next_handler()


def _find_validate(request: Any) -> Callable[[], Any] | None:
    for klass in type(request).__mro__:
        if "validate" in klass.__dict__:
            # BaseModel.validate is pydantic's deprecated parsing classmethod
            if klass is BaseModel:
                return None
            validate = getattr(request, "validate")
            return validate if callable(validate) else None
    return None


def _messages(error: ValueError) -> list[str]:
    if isinstance(error, ValidationError):
        return [
            f"{'.'.join(str(p) for p in item['loc'])}: {item['msg']}"
            for item in error.errors()
        ]
    return [str(error)]
