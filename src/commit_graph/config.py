"""Engine settings, loaded from an optional JSON config file."""

import json
import os
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "COMMIT_GRAPH_CONFIG"


class EngineSettings(BaseModel):
    """Tunable constants for layout and remote projection.

    Spacings are abstract grid units; converting them to pixels is the
    renderer's job.
    """

    column_spacing: int = Field(default=1, gt=0)
    row_spacing: int = Field(default=1, gt=0)
    main_lineage: str = "main"
    detached_lineage: str = "detached"
    remote_name: str = "origin"
    # Remote HEAD fallbacks used when no <remote>/HEAD ref is published
    head_fallbacks: List[str] = ["main", "master"]

    model_config = {"frozen": True}


DEFAULT_SETTINGS = EngineSettings()


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """Load settings from ``path`` or the COMMIT_GRAPH_CONFIG file.

    Falls back to defaults when neither is given.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return DEFAULT_SETTINGS

    config_file = Path(path)
    data = json.loads(config_file.read_text(encoding="utf-8"))
    return EngineSettings.model_validate(data)
