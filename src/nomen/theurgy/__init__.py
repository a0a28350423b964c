"""
Theurgy - Command implementations for nomen.

Each module corresponds to a top-level CLI command:
- status:   Show network, balance and registered name
- register: Register a name, with suggestions when it is taken
- chain:    Look up a chain's display name
- watch:    Follow wallet changes and keep the display current
"""
