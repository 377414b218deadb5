#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from datetime import datetime
import json

import yaml

from ..utils import parse_argv
from ..core import cfg, log, DataError
from ..db_core import db
from ..pick import PickStatus
from .base import Capper, CapperPick

#############
# load_data #
#############

def load_data() -> int:
    """Load (or reload) capper roster from config file into database
    """
    ncappers = 0
    cappers = cfg.config('cappers') or {}
    with db.atomic():
        for name, info in cappers.items():
            capper_data = {'name':         name.lower(),
                           'display_name': info.get('display_name'),
                           'about_me':     info.get('about_me')}
            print(f"Loading capper '{name}'")
            Capper.insert(**capper_data).on_conflict_replace().execute()
            ncappers += 1

    print(f"{ncappers} cappers loaded")
    return 0

##############
# load_picks #
##############

PICK_FIELDS = ('market', 'selection', 'units', 'confidence', 'status',
               'net_units', 'tier', 'tier_score')

def pick_data_iter(picks: list[dict], now: datetime) -> dict:
    cappers = {c.name: c for c in Capper.select()}
    for entry in picks:
        name = str(entry['capper']).lower()
        if name not in cappers:
            raise DataError(f"Capper '{name}' is not known")
        status = entry.get('status') or PickStatus.PENDING.value
        PickStatus(status)  # validate
        pick_data = {'capper':  cappers[name],
                     'game':    entry['game_id'],
                     'pick_ts': entry.get('pick_ts') or now}
        pick_data |= {f: entry[f] for f in PICK_FIELDS if f in entry}
        if entry.get('factors'):
            pick_data['factors'] = json.dumps(entry['factors'])
        yield pick_data

def load_picks(file: str) -> int:
    """Load capper picks from a YAML file, consisting of a list of entries with
    keys `capper`, `game_id`, `market`, `selection`, and optionally `units`,
    `confidence`, `status`, `net_units`, `tier`, `tier_score`, `factors`, and
    `pick_ts`
    """
    with open(file) as f:
        picks = yaml.safe_load(f) or []

    picks_data = list(pick_data_iter(picks, datetime.now()))
    if picks_data:
        with db.atomic():
            CapperPick.insert_many(picks_data).execute()
    log.info(f"{len(picks_data)} picks loaded from '{file}'")
    print(f"{len(picks_data)} picks loaded")
    return 0

########
# main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: python -m metapick.capper <util_func> [<args> ...]

    Functions/usage:
      - load_data
      - load_picks file=<yaml_file>
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
