"""
Page walking for list endpoints.
"""

import dataclasses
import logging
from typing import Iterator, Type, TypeVar

from ..models import Entity
from ..options import PageParameters, RequestOptions, encode_options
from ..resolver import iter_resolved, parse_pagination
from ._http import HTTPClient

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


def iter_pages(
    http: HTTPClient,
    endpoint: str,
    entity_cls: Type[E],
    options: RequestOptions,
) -> Iterator[E]:
    """
    Yield every entity of a list endpoint, following ``meta.pagination``.

    Starts at the page set in ``options.parameters`` (or the first page).
    The caller's options value is copied per page, never modified.

    Walking stops at the last page or at an empty one. It also stops when
    the panel answers with a page other than the one requested.
    """
    parameters = options.parameters or PageParameters()
    page = parameters.page or 1

    while True:
        current = dataclasses.replace(
            options,
            parameters=dataclasses.replace(parameters, page=page),
        )
        payload = http.request("GET", endpoint, query=encode_options(current))

        pagination = parse_pagination(payload)
        if pagination is not None and pagination.current_page != page:
            logger.warning(
                f"{endpoint}: requested page {page} but got page {pagination.current_page}; stopping"
            )
            return

        count = 0
        for entity in iter_resolved(payload, entity_cls):
            count += 1
            yield entity

        if pagination is None or count == 0 or not pagination.has_next:
            return
        page += 1
        logger.debug(f"Fetching {endpoint} page {page}/{pagination.total_pages}")
