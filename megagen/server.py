"""HTTP download endpoint for the generated boilerplate archive."""

from __future__ import annotations

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from megagen.config import Config
from megagen.utils import console, print_error
from megagen.workspace import ArchiveError, SessionWorkspace, iter_chunks

router = APIRouter()


def _log_closed(size: int) -> None:
    console.print("closing...")
    console.print(f"Archive wrote {size} bytes")


@router.get("/download")
async def download_zip(request: Request) -> Response:
    """Stream the boilerplate zip, or answer 500 with the archive error."""
    workspace: SessionWorkspace = request.app.state.workspace
    config = workspace.config

    try:
        data = await workspace.build_zip()
    except ArchiveError as exc:
        print_error(f"Archive failed: {exc}")
        return PlainTextResponse(str(exc), status_code=500)

    return StreamingResponse(
        iter_chunks(data),
        status_code=200,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{config.zip_name}"',
        },
        background=BackgroundTask(_log_closed, len(data)),
    )


def create_app(config: Config | None = None) -> FastAPI:
    """Build the FastAPI app serving :func:`download_zip`."""
    app = FastAPI(title="megagen")
    app.state.workspace = SessionWorkspace(config or Config.from_env())
    app.include_router(router)
    return app
