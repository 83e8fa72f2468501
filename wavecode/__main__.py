"""Entry point for `python -m wavecode`."""

import sys


def main():
    from wavecode.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
