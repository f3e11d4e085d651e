"""AWS utilities."""

from .pagination import list_pages, paginate

__all__: list[str] = ["list_pages", "paginate"]
