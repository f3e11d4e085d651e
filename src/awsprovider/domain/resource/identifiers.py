# src/awsprovider/domain/resource/identifiers.py
from dataclasses import dataclass
from typing import Tuple

from awsprovider.domain.core.exceptions import IdentifierFormatError


@dataclass(frozen=True)
class CompositeId:
    """Identifier made of several non-empty parts joined by ``separator``.

    ``parse(format(*parts)) == parts`` for any valid parts; the last part may
    itself contain the separator.
    """
    field_names: Tuple[str, ...]
    separator: str = ","

    @property
    def expected(self) -> str:
        return self.separator.join(self.field_names)

    def format(self, *parts: str) -> str:
        if any(not isinstance(part, str) for part in parts):
            raise IdentifierFormatError(self.separator.join(str(part) for part in parts), self.expected)
        if len(parts) != len(self.field_names) or any(not part for part in parts):
            raise IdentifierFormatError(self.separator.join(parts), self.expected)
        for part in parts[:-1]:
            if self.separator in part:
                raise IdentifierFormatError(self.separator.join(parts), self.expected)
        return self.separator.join(parts)

    def parse(self, resource_id: str) -> Tuple[str, ...]:
        parts = resource_id.split(self.separator, len(self.field_names) - 1)
        if len(parts) != len(self.field_names) or any(not part for part in parts):
            raise IdentifierFormatError(resource_id, self.expected)
        return tuple(parts)
