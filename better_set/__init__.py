from .collections import BetterSet
