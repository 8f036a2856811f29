"""Pagination helpers shared by the listing layers."""

from slotledger.core.exceptions import InvalidPageError


def normalize_page(page_index: int, page_size: int) -> tuple[int, int]:
    """Validate 1-based pagination parameters."""
    if page_index < 1 or page_size < 1:
        raise InvalidPageError(page_index, page_size)
    return page_index, page_size


def page_offset(page_index: int, page_size: int) -> int:
    page_index, page_size = normalize_page(page_index, page_size)
    return (page_index - 1) * page_size
