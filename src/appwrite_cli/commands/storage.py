"""Storage commands -- list, inspect, download and upload bucket files.

``create-file`` goes through :meth:`~appwrite_cli.client.Client.upload`, so
files larger than the chunk size are uploaded in ``content-range`` chunks
and resume where a previous attempt stopped when ``--file-id`` is fixed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from appwrite_cli import sdk
from appwrite_cli.client import format_api_response
from appwrite_cli.exceptions import InvalidUsageError
from appwrite_cli.models import InputFile
from appwrite_cli.output import debug, success
from appwrite_cli.parsing import parse_bool

storage_app = typer.Typer(no_args_is_help=True)


@storage_app.command("list-files")
def storage_list_files(
    bucket_id: str = typer.Option(..., "--bucket-id", help="Storage bucket unique ID."),
    queries: Optional[list[str]] = typer.Option(
        None,
        "--queries",
        help="Query string generated using the Query class. Repeat for several queries.",
    ),
    search: Optional[str] = typer.Option(
        None, "--search", help="Search term to filter your list results. Max length: 256 chars."
    ),
    total: Optional[str] = typer.Option(
        None,
        "--total",
        callback=parse_bool,
        help="When set to false, the total count returned will be 0 and will not be calculated.",
    ),
) -> None:
    """Get a list of all the files in a bucket."""
    sdk.execute(
        "GET",
        f"/storage/buckets/{bucket_id}/files",
        sdk.payload({"queries": queries, "search": search, "total": total}),
    )


@storage_app.command("get-file")
def storage_get_file(
    bucket_id: str = typer.Option(..., "--bucket-id", help="Storage bucket unique ID."),
    file_id: str = typer.Option(..., "--file-id", help="File ID."),
) -> None:
    """Get a file's metadata by its unique ID."""
    sdk.execute("GET", f"/storage/buckets/{bucket_id}/files/{file_id}")


@storage_app.command("get-file-download")
def storage_get_file_download(
    bucket_id: str = typer.Option(..., "--bucket-id", help="Storage bucket unique ID."),
    file_id: str = typer.Option(..., "--file-id", help="File ID."),
) -> None:
    """Download a file; the raw bytes are written to stdout.

    Example::

        appwrite storage get-file-download --bucket-id photos --file-id cat > cat.png
    """
    sdk.execute("GET", f"/storage/buckets/{bucket_id}/files/{file_id}/download")


@storage_app.command("create-file")
def storage_create_file(
    bucket_id: str = typer.Option(..., "--bucket-id", help="Storage bucket unique ID."),
    file_id: str = typer.Option(
        ...,
        "--file-id",
        help='File ID. Choose a custom ID or pass "unique()" to auto generate it.',
    ),
    file: Path = typer.Option(..., "--file", help="Path to the file to upload."),
    permissions: Optional[list[str]] = typer.Option(
        None,
        "--permissions",
        help="Permission string, e.g. 'read(\"any\")'. Repeat for several permissions.",
    ),
) -> None:
    """Upload a file to a bucket.

    Files over 5 MiB are sent in chunks. Re-running the command with the same
    concrete ``--file-id`` continues an interrupted upload.
    """
    if not file.is_file():
        raise InvalidUsageError(f"File not found: {file}")

    params: dict[str, Any] = sdk.payload({
        "fileId": file_id,
        "file": InputFile.from_path(file),
        "permissions": permissions,
    })

    def _progress(event: dict[str, Any]) -> None:
        debug(
            f"Uploaded {event['sizeUploaded']} bytes ({event['progress']:.0f}%), "
            f"chunk {event['chunksUploaded']}/{event['chunksTotal']}"
        )

    client = sdk.sdk_for_project()
    with client:
        response = client.upload(
            f"/storage/buckets/{bucket_id}/files",
            params,
            file_param="file",
            id_param="fileId",
            on_progress=_progress,
        )
    format_api_response(response)
    success()
