"""QuickApp file endpoints: /api/quickApp/{id}/files[/{name}]."""

from __future__ import annotations

import json
import logging
import re
from urllib.parse import quote

from pyhc3._constants import DEFAULT_FILE_TYPE, FILE_NAME_MIN_LENGTH, QUICK_APP_ENDPOINT
from pyhc3._transport import Transport
from pyhc3.exceptions import Hc3FileNameError, Hc3TransportError
from pyhc3.models.quickapp_file import QuickAppFile

_logger = logging.getLogger(__name__)

_FILE_NAME_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_file_name(name: str) -> str:
    """Check a new QuickApp file name and return it unchanged.

    Raises
    ------
    Hc3FileNameError
        Shorter than three characters, or containing anything besides
        letters, digits, underscores, dots and hyphens.
    """
    if len(name) < FILE_NAME_MIN_LENGTH:
        raise Hc3FileNameError(f"File name must be at least {FILE_NAME_MIN_LENGTH} characters long")
    if not _FILE_NAME_RE.match(name):
        raise Hc3FileNameError("File name can only contain letters, numbers, underscores, dots, and hyphens")
    return name


def _files_endpoint(device_id: int) -> str:
    return f"{QUICK_APP_ENDPOINT}/{device_id}/files"


def _file_endpoint(device_id: int, name: str) -> str:
    return f"{_files_endpoint(device_id)}/{quote(name, safe='')}"


async def list_files(transport: Transport, device_id: int) -> list[QuickAppFile]:
    """List the files of a QuickApp (without content)."""
    response = await transport.request("GET", _files_endpoint(device_id))
    decoded = response.json()
    if not isinstance(decoded, list):
        return []
    files: list[QuickAppFile] = []
    for item in decoded:
        # Some firmware versions list bare names.
        if isinstance(item, str):
            files.append(QuickAppFile(name=item))
        elif isinstance(item, dict) and isinstance(item.get("name"), str):
            files.append(QuickAppFile.model_validate(item))
    return files


async def get_file(transport: Transport, device_id: int, name: str) -> QuickAppFile:
    """Read one file including its content.

    A JSON object with a ``content`` field is parsed as a file record;
    any other body is taken as the file content verbatim.
    """
    response = await transport.request("GET", _file_endpoint(device_id, name))
    try:
        decoded = json.loads(response.text)
    except json.JSONDecodeError:
        decoded = None
    if isinstance(decoded, dict) and decoded.get("content"):
        payload = dict(decoded)
        payload.setdefault("name", name)
        return QuickAppFile.model_validate(payload)
    return QuickAppFile(name=name, content=response.text)


async def save_file(transport: Transport, device_id: int, name: str, content: str) -> None:
    """Overwrite the content of an existing file."""
    await transport.request(
        "PUT",
        _file_endpoint(device_id, name),
        json_body={"content": content, "name": name},
    )
    _logger.debug("Saved file %s of QuickApp %s", name, device_id)


async def create_file(
    transport: Transport,
    device_id: int,
    name: str,
    *,
    content: str = "",
    file_type: str = DEFAULT_FILE_TYPE,
) -> None:
    """Create a new, non-main file."""
    validate_file_name(name)
    await transport.request(
        "POST",
        _file_endpoint(device_id, name),
        json_body={"name": name, "content": content, "isMain": False, "type": file_type},
    )
    _logger.debug("Created file %s in QuickApp %s", name, device_id)


async def rename_file(transport: Transport, device_id: int, old_name: str, new_name: str) -> None:
    """Rename a file.

    The hub has no rename call: the current record is read, its ``name``
    replaced, and the result written back to the old path.
    """
    if new_name == old_name:
        return
    validate_file_name(new_name)
    response = await transport.request("GET", _file_endpoint(device_id, old_name))
    record = response.json()
    if not isinstance(record, dict):
        raise Hc3TransportError(
            f"Expected a file object for {old_name}, got {type(record).__name__}",
            status_code=response.status,
            endpoint=response.endpoint,
        )
    record["name"] = new_name
    await transport.request("PUT", _file_endpoint(device_id, old_name), json_body=record)
    _logger.debug("Renamed file %s to %s in QuickApp %s", old_name, new_name, device_id)


async def delete_file(transport: Transport, device_id: int, name: str) -> None:
    """Delete a file."""
    await transport.request("DELETE", _file_endpoint(device_id, name))
    _logger.debug("Deleted file %s from QuickApp %s", name, device_id)
