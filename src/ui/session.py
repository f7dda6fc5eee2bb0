from __future__ import annotations

from typing import Any, MutableMapping, Optional, Tuple


UploadSig = Tuple[str, int]

STATE_DEFAULTS = {
    "media": None,
    "upload_sig": None,
    "result": None,
    "error": None,
    "zoom": 1.0,
    "uploader_key": 0,
}


def init_state(state: MutableMapping[str, Any]) -> None:
    for key, value in STATE_DEFAULTS.items():
        if key not in state:
            state[key] = value


def reset_upload(state: MutableMapping[str, Any]) -> None:
    state["media"] = None
    state["upload_sig"] = None
    state["result"] = None
    state["error"] = None
    state["zoom"] = 1.0


def clear_file(state: MutableMapping[str, Any]) -> None:
    """Drop the upload and remount the uploader widget empty."""
    reset_upload(state)
    state["uploader_key"] += 1


def sync_upload(state: MutableMapping[str, Any], sig: Optional[UploadSig]) -> bool:
    """Align session state with the uploader; True when `sig` is a new file to read."""
    if sig is None:
        # Removed through the uploader's own close button
        if state["upload_sig"] is not None:
            reset_upload(state)
        return False

    if sig == state["upload_sig"]:
        return False

    reset_upload(state)
    state["upload_sig"] = sig
    return True
