#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys

import regex as re
from peewee import OperationalError

from .utils import parse_argv
from .db_core import db, BaseModel
from .team import Team
from .game import Game
from .capper import Capper, CapperPick

# in dependency order (referenced tables first)
ALL_MODELS = [Team, Game, Capper, CapperPick]

##########
# Schema #
##########

def create_schema(models: list[type[BaseModel] | str] | str = None, force: bool = False) -> int:
    """Create tables for the specified models (all models, if not specified).  Note
    that existing tables are left alone (even if the model schema has changed),
    unless `force` is specified, in which case they are dropped and recreated.

    :raises RuntimeError: if invalid models are specified
    :param models: list of model classes or names, or string of comma-separated names
    :param force: drop and recreate tables that already exist (data is lost!)
    :return: status code (0 is success)
    """
    if not models:
        models = ALL_MODELS
    elif isinstance(models, str):
        models = [m.strip() for m in models.split(',')]
    model_objs = []
    for model in models:
        if isinstance(model, str):
            if model not in globals():
                raise RuntimeError(f"Model {model} not imported")
            model = globals()[model]
        if not isinstance(model, type) or not issubclass(model, BaseModel):
            raise RuntimeError(f"Model {model} must be subclass of `BaseModel`")
        model_objs.append(model)

    if db.is_closed():
        db.connect()
    for model in model_objs:
        try:
            model.create_table(safe=False)
        except OperationalError as e:
            if not re.fullmatch(r'table "?(\w+)"? already exists', str(e)):
                raise
            if force:
                model.drop_table(safe=False)
                model.create_table(safe=False)
            else:
                print(f"Table for {model.__name__} already exists, skipping", file=sys.stderr)

    return 0

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: db_admin.py <util_func> [<args> ...]

    Functions/usage:
      - create_schema [models=<model,model,...>] [force=<bool>]
    """
    if len(sys.argv) < 2:
        print(f"Utility function not specified", file=sys.stderr)
        return -1
    elif sys.argv[1] not in globals():
        print(f"Unknown utility function '{sys.argv[1]}'", file=sys.stderr)
        return -1

    util_func = globals()[sys.argv[1]]
    args, kwargs = parse_argv(sys.argv[2:])

    return util_func(*args, **kwargs)

if __name__ == '__main__':
    sys.exit(main())
