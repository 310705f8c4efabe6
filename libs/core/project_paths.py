from pathlib import Path


def get_project_root() -> Path:
    """
    Locate the project root without relying on the working directory.

    Rules:
    - walk upwards from this file
    - the first directory holding both `pyproject.toml` and `apps/` wins
    - otherwise fall back to the parent of `libs/`
    """
    here = Path(__file__).resolve()
    for parent in [here] + list(here.parents):
        if (parent / "pyproject.toml").exists() and (parent / "apps").exists():
            return parent
    # .../libs/core/project_paths.py -> .../libs -> .../<root>
    return here.parents[2]
