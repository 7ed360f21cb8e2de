"""
Read/write the per-directory settings file.
"""


from atomicwrites import atomic_write
from typing import NamedTuple
import json
import os


class ConfigError(Exception):
    """The settings file is unreadable or holds invalid values"""


class Settings(NamedTuple):
    top_n: int = 10
    recent_limit: int = 10
    # the default date range reaches back this many years from today
    default_years: int = 1


class SettingsFile:
    def __init__(self, root):
        self.path = os.path.join(root, 'settings.json')

    def exists(self):
        return os.path.exists(self.path)

    def write_boilerplate(self):
        with atomic_write(self.path, mode='w', overwrite=False) as f:
            json.dump(Settings()._asdict(), f, indent=4)
            f.write('\n')

    def read(self):
        """
        Raises:
            ConfigError
        """
        if not self.exists():
            return Settings()
        try:
            with open(self.path) as f:
                data = json.load(f)
        except ValueError as e:
            raise ConfigError(f'{self.path}: {e}') from e
        if not isinstance(data, dict):
            raise ConfigError(f'{self.path}: expected an object')
        unknown = set(data) - set(Settings._fields)
        if unknown:
            raise ConfigError('{}: unknown settings {}'.format(
                self.path, ', '.join(sorted(unknown))))
        for key, value in data.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f'{self.path}: {key} must be a positive integer')
        return Settings(**data)
