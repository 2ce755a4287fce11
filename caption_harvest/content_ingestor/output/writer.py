# caption_harvest/content_ingestor/output/writer.py
"""
Artifact writer: one JSON file per ingestion run.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Union

UNSAFE_CHARS = re.compile(r"[^\w-]")


def artifact_filename(content_object: Dict[str, Any]) -> str:
    video_id = content_object.get("source", {}).get("video_id")
    if video_id:
        return f"{UNSAFE_CHARS.sub('_', video_id)}.json"
    return f"{content_object['identity']['content_id']}.json"


def write_artifact(content_object: Dict[str, Any], output_dir: Union[str, Path]) -> Path:
    """Write the content object as pretty JSON and return the file path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / artifact_filename(content_object)
    tmp_path = path.with_suffix(".json.tmp")
    tmp_path.write_text(json.dumps(content_object, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
    tmp_path.replace(path)
    return path
