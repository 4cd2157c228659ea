from typing import Dict, List


class Validation:
    """Collects messages about why a submission was refused, keyed by field."""

    def __init__(self):
        self._results: Dict[str, List[str]] = {}

    def add_result(self, field_name: str, message: str) -> None:
        self._results.setdefault(field_name, []).append(message)

    def results(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self._results.items()}

    def is_valid(self) -> bool:
        return not self._results
