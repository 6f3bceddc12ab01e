"""
Console subpackage: holds the REPL loop, rendering, key bindings and slash-command prompt integration.
"""

from slash_engine.console.repl_console import ReplConsole

__all__ = ["ReplConsole"]
