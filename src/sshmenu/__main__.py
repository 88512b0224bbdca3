"""Module entrypoint for `python -m sshmenu`."""

from sshmenu.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
