"""
Athlete Unknown Core - the round engine of the Athlete Unknown guessing game.

A round hides one athlete behind nine fact tiles. Players flip tiles and
guess the name; every flip and wrong guess costs points. This package holds
the rules and the resumable session state and has no web framework
dependencies.
"""

__version__ = "0.1.0"
