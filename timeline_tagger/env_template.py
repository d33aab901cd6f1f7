"""Generate .env template for the tag backfill job and preview UI.

We never write credentials: DATABASE_URL is always left blank, even when
prefilling from the current environment.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from settings import DEFAULT_BATCH_LIMIT

# (name, default, comment)
ENV_VARS = [
    ("DATABASE_URL", "", 'Postgres holding the "timelineEvents" table'),
    ("TAG_COUNTRY_ID", "", "Only tag one country (blank = all)"),
    ("TAG_OVERWRITE", "false", "Re-tag events that already have tags"),
    ("TAG_BATCH_LIMIT", str(DEFAULT_BATCH_LIMIT), "Max events per run (1..5000)"),
    ("LOG_LEVEL", "INFO", None),
]

_SECRET_VARS = {"DATABASE_URL"}


def render_env_template(*, from_env: bool = False) -> str:
    lines = []
    for name, default, comment in ENV_VARS:
        if comment:
            lines.append(f"# {comment}")
        value = default
        if from_env and name not in _SECRET_VARS:
            value = os.getenv(name) or default
        lines.append(f"{name}={value}")
    return "\n".join(lines) + "\n"


def write_env_template(path: str | Path = ".env.template", *, from_env: bool = False, overwrite: bool = False) -> Path:
    p = Path(path)
    if p.exists() and not overwrite:
        raise FileExistsError(f"{p} already exists (pass overwrite=True to replace it)")
    p.write_text(render_env_template(from_env=from_env), encoding="utf-8")
    return p


if __name__ == "__main__":
    out = write_env_template(sys.argv[1] if len(sys.argv) > 1 else ".env.template")
    print(f"wrote: {out}")
