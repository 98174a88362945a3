# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from beeline import configuration


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        loaded = None
        if configuration.APP_CONFIG_PATH.is_file():
            loaded = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        # Fill in any keys missing from older or hand-written config files
        self._config = configuration.get_default_configuration()
        if loaded is not None:
            for key in self._config:
                if key in loaded:
                    self._config[key] = loaded[key]  # type: ignore[literal-required]

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        editor: Optional[str] = None,
        remove_editor: bool = False,
        edit_limit: Optional[int] = None,
        backup_filename: Optional[str] = None,
        api_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        log_level: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if editor is not None:
            self.config["editor"] = editor
        if remove_editor:
            self.config["editor"] = None
        if edit_limit is not None:
            self.config["edit_limit"] = edit_limit
        if backup_filename is not None:
            self.config["backup_filename"] = backup_filename
        if api_base_url is not None:
            self.config["api_base_url"] = api_base_url
        if timeout is not None:
            self.config["timeout"] = timeout
        if log_level is not None:
            self.config["log_level"] = log_level.upper()


CONFIGURATION_REPO = ConfigurationRepository()
