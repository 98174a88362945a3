# SPDX-License-Identifier: MIT

import logging

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from beeline import configuration

logger = logging.getLogger(__name__)


def initialize() -> None:
    """First run: write a config file holding every default setting."""
    config_file = configuration.APP_CONFIG_PATH
    if config_file.is_file():
        return

    config_file.parent.mkdir(parents=True, exist_ok=True)
    defaults = dict(configuration.get_default_configuration())
    config_file.write_text(dump(defaults, Dumper=Dumper))
    logger.debug("Created default config at %s", config_file)
