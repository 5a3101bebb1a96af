"""
API route for expanding RIB text.

Endpoints
---------
- `POST /expand`: Expand inline archives and object instances (synchronous;
  the work is CPU-bound and proportional to the input size).
"""

from __future__ import annotations

from fastapi import APIRouter, status

from ristream.api.schemas import ErrorPayload, ExpandRequest, ExpandResponse, StreamInfo
from ristream.pipelines.expand import run_expand

router = APIRouter(tags=["Expand"])


@router.post(
    "/expand",
    response_model=ExpandResponse,
    status_code=status.HTTP_200_OK,
    summary="Expand inline archives in a RIB stream",
)
def expand(request: ExpandRequest) -> ExpandResponse:
    """
    Run the expand pipeline on the posted RIB text.

    Problems in the input do not fail the request; they are listed in
    ``errors`` alongside whatever could be expanded.
    """
    result = run_expand(
        request.rib,
        capture_archive_records=request.capture_archive_records,
        max_replay_depth=request.max_replay_depth,
    )
    snap = result["snapshot"]
    return ExpandResponse(
        rib=result["rib"],
        requests=result["requests"],
        errors=[ErrorPayload(**e) for e in result["errors"]],
        archives=[StreamInfo(**s) for s in snap["archives"]],
        objects=[StreamInfo(**s) for s in snap["objects"]],
    )
