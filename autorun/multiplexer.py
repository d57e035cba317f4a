import select
from typing import Callable, List, Optional, Tuple

from .errors import LoopError, SetupError

ReadyList = List[Tuple[int, int]]
Handler = Callable[[ReadyList], bool]


class EventMultiplexer:
    """Block on a single descriptor with epoll and hand readiness to a handler."""

    def __init__(self) -> None:
        try:
            self._epoll = select.epoll()
        except OSError as e:
            raise SetupError(f"epoll_create: {e.strerror}", e.errno) from e
        self._fd: Optional[int] = None

    def __enter__(self) -> "EventMultiplexer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def register(self, fd: int) -> None:
        if self._fd is not None:
            raise SetupError(f"epoll_ctl: descriptor {self._fd} already registered")
        try:
            self._epoll.register(fd, select.EPOLLIN)
        except OSError as e:
            raise SetupError(f"epoll_ctl: {e.strerror}", e.errno) from e
        self._fd = fd

    def run(self, handler: Handler) -> None:
        """Wait forever, calling ``handler`` after each wakeup.

        Returns once ``handler`` returns a falsy value. A wait interrupted by
        a signal is retried; any other wait error raises ``LoopError``.
        """
        if self._fd is None:
            raise SetupError("epoll_wait: no descriptor registered")

        running = True
        while running:
            try:
                ready = self._epoll.poll()
            except InterruptedError:
                continue
            except OSError as e:
                raise LoopError(f"epoll_wait: {e.strerror}", e.errno) from e

            running = bool(handler(ready))

    def close(self) -> None:
        if not self._epoll.closed:
            self._epoll.close()
