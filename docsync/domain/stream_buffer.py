class StreamBuffer:
    """Per-stream accumulation state, owned by one StreamAggregator."""

    def __init__(self):
        self._all: list[str] = []
        self._pending: list[str] = []

    def append(self, fragment: str) -> None:
        self._all.append(fragment)
        self._pending.append(fragment)

    @property
    def accumulated_all(self) -> str:
        return "".join(self._all)

    @property
    def pending_since_last_flush(self) -> str:
        return "".join(self._pending)

    def has_pending(self) -> bool:
        return any(self._pending)

    def clear_pending(self) -> None:
        self._pending.clear()
