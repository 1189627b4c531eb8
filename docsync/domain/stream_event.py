from typing import NamedTuple, Optional


class StreamEvent(NamedTuple):
    """One increment of a model text stream."""
    content: Optional[str]
    finish_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.finish_reason == "stop"
