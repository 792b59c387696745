"""Metadata router -- publish and query application metadata.

Failures are reported in the response body as a JSON string holding the
error message, with status 200, so existing clients keep working.
"""

from __future__ import annotations

import logging
from typing import Union

from fastapi import APIRouter, Depends, Query, Request

from metadir.directory.errors import DirectoryError
from metadir.directory.memory_directory import MetadataDirectory
from metadir.directory.models import MetadataQuery
from metadir.utils.decoder import decode_payload

from web.backend.app.models.api import RecordResponse, record_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["metadata"])


def get_directory(request: Request) -> MetadataDirectory:
    """Return the directory owned by the running application."""
    return request.app.state.directory


@router.post(
    "/metadata",
    response_model=Union[RecordResponse, str],
    summary="Create or replace application metadata",
)
async def create_metadata(
    request: Request,
    directory: MetadataDirectory = Depends(get_directory),
):
    """Store metadata from a YAML or JSON request body.

    A second payload with the same ``source`` replaces the first one.
    """
    body = await request.body()
    try:
        record = directory.upsert(decode_payload(body))
    except DirectoryError as exc:
        logger.warning("Rejected metadata payload: %s", exc.message)
        return exc.message
    return record_to_response(record)


@router.get(
    "",
    response_model=Union[list[RecordResponse], str],
    summary="Query application metadata",
)
async def get_metadata(
    source: str = Query("", description="Source identifier; takes precedence"),
    company: str = Query("", description="Company owning the applications"),
    title: str = Query("", description="Narrow a company query by title"),
    directory: MetadataDirectory = Depends(get_directory),
):
    """Look up metadata by source, or by company and optional title."""
    query = MetadataQuery(source=source, company=company, title=title)
    try:
        records = directory.query(query)
    except DirectoryError as exc:
        logger.warning("Rejected metadata query: %s", exc.message)
        return exc.message
    return [record_to_response(r) for r in records]
