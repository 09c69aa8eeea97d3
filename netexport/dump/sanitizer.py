from typing import Any, Dict, Iterable, List, Optional

REDACTED = '***REDACTED***'


class SecurityStripper:
    """Redact credentials and cookies from captured diagnostic data."""

    def __init__(self, redact_fields: Optional[Iterable[str]] = None):
        base_sensitive = {'authorization', 'proxy-authorization', 'cookie', 'set-cookie', 'password'}
        additional = {value.lower() for value in (redact_fields or [])}
        self.sensitive_fields = base_sensitive | additional

    def is_sensitive(self, name: str) -> bool:
        return name.strip().lower() in self.sensitive_fields

    def strip(self, value: Any) -> Any:
        """Return a redacted copy of `value`; the input is left untouched."""
        if isinstance(value, dict):
            result: Dict[Any, Any] = {}
            for key, item in value.items():
                if isinstance(key, str) and self.is_sensitive(key):
                    result[key] = REDACTED
                else:
                    result[key] = self.strip(item)
            return result
        if isinstance(value, list):
            return [self._strip_header_line(item) if isinstance(item, str) else self.strip(item) for item in value]
        return value

    def strip_events(self, events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self.strip(event) for event in events]

    def _strip_header_line(self, line: str) -> str:
        # Lists of raw header lines, e.g. ['Cookie: a=b', 'Accept: */*']
        name, separator, _ = line.partition(':')
        if separator and self.is_sensitive(name):
            return f'{name}: {REDACTED}'
        return line
