"""Common helper functions for I/O.

The collector writes exactly one artefact per run.  This module
centralises directory creation and the JSON write so that the output
is either fully replaced or left untouched: the payload is written to a
temporary file next to the target and moved into place.
"""

from __future__ import annotations

import json
import os
import pathlib
import tempfile
from typing import Any, Dict, Union


def ensure_dir(path: Union[str, pathlib.Path]) -> None:
    """Ensure that the directory exists."""
    pathlib.Path(path).mkdir(parents=True, exist_ok=True)


def write_json(payload: Dict[str, Any], path: Union[str, pathlib.Path]) -> pathlib.Path:
    """Write ``payload`` as 2‑space indented UTF‑8 JSON, overwriting ``path``.

    The directory will be created if it does not exist.  Keys keep the
    insertion order of ``payload``.
    """
    path = pathlib.Path(path)
    ensure_dir(path.parent)
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600 files; the output is meant to be served.
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        pathlib.Path(tmp).unlink(missing_ok=True)
        raise
    return path
