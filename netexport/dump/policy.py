from netexport.export.interfaces import StrippingPolicy


class SecurityStrippingPolicy(StrippingPolicy):
    """Whether cookies and credentials are removed from dumps and live views."""

    def __init__(self, enabled: bool = True):
        self._enabled = enabled

    def get(self) -> bool:
        return self._enabled

    def set(self, enabled: bool) -> None:
        self._enabled = bool(enabled)
