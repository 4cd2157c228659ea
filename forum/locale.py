from typing import Dict, Mapping, Optional


class Locale:
    """Translation table for user-facing strings.

    Codes are the English source strings; a missing definition falls back to
    the given default, then to the code itself.
    """

    def __init__(self, name: str = "en-CA", definitions: Optional[Mapping[str, str]] = None):
        self.name = name
        self.definitions: Dict[str, str] = dict(definitions or {})

    def translate(self, code: str, default: Optional[str] = None) -> str:
        if code in self.definitions:
            return self.definitions[code]
        return code if default is None else default

    def define(self, code: str, translation: str) -> None:
        self.definitions[code] = translation
