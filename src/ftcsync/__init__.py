"""ftcsync -- keep a local directory in sync with an FTC robot.

Talks to the OnBotJava web server running on the robot controller:
one-shot HTTP calls for the file commands, plus an interactive REPL that
triggers builds and shows build events pushed over a websocket.
"""

__version__ = "0.1.0"
