"""Transaction handling shared by the service layer."""

import functools
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError

from ..exceptions import ConflictError
from ..logging import get_logger

logger = get_logger("services")

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def transactional(func: F) -> F:
    """Run a service method as one unit of work on ``self.session``.

    Commits when the method returns. Any exception rolls everything back;
    an IntegrityError that escapes to commit time becomes ConflictError.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await func(self, *args, **kwargs)
            await self.session.commit()
            return result
        except IntegrityError as exc:
            await self.session.rollback()
            logger.warning(
                "Integrity violation in %s", func.__name__, extra={"operation": func.__name__}
            )
            raise ConflictError("Conflicting change, please retry") from exc
        except Exception:
            await self.session.rollback()
            raise

    return wrapper  # type: ignore[return-value]
