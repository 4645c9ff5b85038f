"""
Protocol front ends for the engine.

Modules:
    uci — UCI handler driving fixed-depth searches over stdin/stdout.
          Run directly with: python interface/uci.py
"""
