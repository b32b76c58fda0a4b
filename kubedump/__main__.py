"""Allow ``python -m kubedump``."""

from .cli.main import app

app(prog_name="kubedump")
