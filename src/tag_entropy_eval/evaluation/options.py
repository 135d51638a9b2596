"""
Configuration for tag entropy evaluation runs.

A run's options live in ``options.toml``, either in the run directory itself
(``<data set>/<algorithm>``) or in its data set directory, where they apply to
every algorithm measured on that data set::

    [tag_entropy]
    list_size = 10
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

OPTIONS_FILE = "options.toml"


def find_options_file(run_dir: Path) -> Path | None:
    "Find the options file that applies to a run directory, if any."
    for candidate in [run_dir / OPTIONS_FILE, run_dir.parent / OPTIONS_FILE]:
        if candidate.exists():
            return candidate
        logger.debug("no options in %s", candidate.parent)
    return None


def load_eval_options(run_dir: Path) -> EvalOptionRoot:
    """
    Load the evaluation options for a run directory.

    Raises:
        NotADirectoryError: if ``run_dir`` is not a directory.
        pydantic.ValidationError: if the options file is invalid.
    """
    if not run_dir.is_dir():
        raise NotADirectoryError(f"run directory {run_dir} does not exist")

    opt_file = find_options_file(run_dir)
    if opt_file is None:
        logger.info("no options for %s, using defaults", run_dir)
        return EvalOptionRoot()

    logger.info("reading run options from %s", opt_file)
    return EvalOptionRoot.model_validate(tomllib.loads(opt_file.read_text()))


class TagEntropyOptions(BaseModel):
    list_size: int = Field(default=10, gt=0)
    "The number of recommendations to request for each user."


class EvalOptionRoot(BaseModel):
    "Root schema of ``options.toml``."

    tag_entropy: TagEntropyOptions = TagEntropyOptions()
