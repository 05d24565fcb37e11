"""Environment variable loader for the .bhugo file."""

from __future__ import annotations

from pathlib import Path

from dotenv import dotenv_values

DEFAULT_ENV_FILE = ".bhugo"


def read_env_file(env_path: Path | str | None = None) -> dict[str, str]:
    """Read variables from a .bhugo file without touching ``os.environ``.

    Args:
        env_path: Path to the env file. If None, ``.bhugo`` in the working
            directory is used when it exists.

    Returns:
        Mapping of variable names to values, empty if no file was found.
    """
    path = Path(env_path) if env_path is not None else Path(DEFAULT_ENV_FILE)

    if not path.exists():
        return {}

    values = dotenv_values(path.resolve())
    # Keys without a value ("FOO" on its own line) come back as None.
    return {k: v for k, v in values.items() if v is not None}
