# -*- coding: utf-8 -*-

from .base     import Capper, CapperPick, meta_cappers
from .__main__ import main
