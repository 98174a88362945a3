# SPDX-License-Identifier: MIT

from beeline.cleanup import register_cleanup
from beeline.initialize import initialize
from beeline.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
