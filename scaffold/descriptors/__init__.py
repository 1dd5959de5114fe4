"""
Deploy descriptors for the contracts in ``contracts/``.

One module per root contract, named like the contract file. Add new ones to
``register`` below.
"""
from scaffold.descriptors import main


def register(registry):
    registry.register_module("main", main)
