# -*- coding: utf-8 -*-

import os.path
from collections.abc import Iterable
import json

import yaml

##########
# Config #
##########

class Config:
    """Manages YAML configuration files for the project.  Top-level sections from
    multiple files are merged in load order (later files override earlier ones at
    the section level).
    """
    config_dir: str
    files:      list[str]
    data:       dict

    def __init__(self, files: str | Iterable[str], config_dir: str = None):
        self.config_dir = config_dir or ''
        self.files = []
        self.data = {}
        if isinstance(files, str):
            files = [f for f in files.split(',') if f]
        for file in files:
            self.load(file)

    def load(self, file: str) -> None:
        """Load (or reload) a config file, merging its sections into the current
        config.  Missing files are silently ignored, so that optional overlays
        (e.g. environment-specific files) need not be present.
        """
        path = file if os.path.isabs(file) else os.path.join(self.config_dir, file)
        if not os.path.exists(path):
            return
        with open(path) as f:
            file_data = yaml.safe_load(f) or {}
        self.data.update(file_data)
        if file not in self.files:
            self.files.append(file)

    def config(self, section: str) -> dict | None:
        """Return the config section (or `None`, if not present)
        """
        return self.data.get(section)

##############
# parse_argv #
##############

def typecast(value: str) -> str | int | float | bool | None:
    """Interpret a command line value string (best effort)
    """
    if value.lower() in ('true', 'yes', 't', 'y'):
        return True
    if value.lower() in ('false', 'no', 'f', 'n'):
        return False
    if value.lower() in ('none', 'null'):
        return None
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    if value[:1] in ('[', '{'):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass
    return value

def parse_argv(argv: list[str]) -> tuple[list, dict]:
    """Take a list of arguments (typically a slice of sys.argv), which may be a
    combination of positional and keyword arguments (e.g. `key=value`), and
    return the interpreted `args` and `kwargs`.  Positional arguments may not
    follow keyword arguments.
    """
    args = []
    kwargs = {}

    for arg in argv:
        if '=' in arg:
            key, value = arg.split('=', 1)
            kwargs[key] = typecast(value)
        else:
            if kwargs:
                raise RuntimeError(f"Positional arg '{arg}' after keyword args")
            args.append(typecast(arg))

    return args, kwargs
