#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys

from peewee import *

from .utils import parse_argv
from .core import cfg, log, ConfigError
from .db_core import db, BaseModel

#################
# Team metadata #
#################

TEAMS_KEY = 'teams'

def build_aliases(teams: dict) -> dict[str, str]:
    """Return mapping from alternate team codes (as found in various pick sources),
    as well as single-word team names, to the canonical code
    """
    aliases = {}
    for code, info in teams.items():
        for alias in info.get('aliases') or []:
            alias = str(alias).upper()
            if alias in teams or alias in aliases:
                raise ConfigError(f"Alias '{alias}' for team '{code}' is ambiguous")
            aliases[alias] = code
        name = str(info.get('name') or '').upper()
        if name and ' ' not in name and name not in teams:
            aliases.setdefault(name, code)
    return aliases

# side parsing works without team metadata (codes are just uppercased), so a
# missing section is only fatal for `load_data()`
TEAMS = cfg.config(TEAMS_KEY) or {}
if not TEAMS:
    log.warning(f"'{TEAMS_KEY}' not found in config file, team aliases disabled")
TEAM_ALIAS = build_aliases(TEAMS)

def normalize_code(code: str) -> str:
    """Return the canonical team code for the specified code or alias (case-
    insensitive); unknown codes are returned uppercased, but otherwise as is
    """
    upper = code.upper()
    return TEAM_ALIAS.get(upper, upper)

########
# Team #
########

class Team(BaseModel):
    """Represents a currently active team, identified by its canonical short code
    (i.e. the code used in pick selections, such as "LAL -4.5")
    """
    code      = TextField(primary_key=True)
    name      = TextField()
    full_name = TextField(unique=True)

    def __str__(self) -> str:
        return self.code

#############
# load_data #
#############

def load_data() -> int:
    """Load teams data into the database.  The base data is specified in the config
    file for the project.
    """
    if not TEAMS:
        raise ConfigError(f"'{TEAMS_KEY}' not found in config file")
    teams_data = []
    for code, info in TEAMS.items():
        team_data = {'code'      : code,
                     'name'      : str(info['name']),
                     'full_name' : info['full_name']}
        teams_data.append(team_data)

    if db.is_closed():
        db.connect()
    with db.atomic():
        Team.insert_many(teams_data).on_conflict_replace().execute()

    print(f"{len(teams_data)} teams loaded")
    return 0

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: team.py <util_func> [<args> ...]

    Functions/usage:
      - load_data
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
