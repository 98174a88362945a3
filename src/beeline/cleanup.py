# SPDX-License-Identifier: MIT

import atexit

from beeline.repository.beeminder import BEEMINDER_REPO
from beeline.repository.configuration import CONFIGURATION_REPO


def flush_and_close() -> None:
    CONFIGURATION_REPO.flush()
    BEEMINDER_REPO.close()


def register_cleanup() -> None:
    atexit.register(flush_and_close)
