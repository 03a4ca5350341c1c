"""
BAR Unit AutoReplace - Interactive REPL
=========================================
"""

import cmd
from typing import Optional

import yaml

from bar_autoreplace.format import print_echoes, print_orders, print_tables
from bar_autoreplace.io import load_scenario
from bar_autoreplace.replay import ScenarioRunner


class ReplayREPL(cmd.Cmd):
    intro = (
        "\n"
        "================================================\n"
        "  BAR Unit AutoReplace - Interactive Replay\n"
        "================================================\n"
        "Type 'help' for commands. 'load <file>' to start.\n"
    )
    prompt = "autoreplace> "

    def __init__(self, runner: Optional[ScenarioRunner] = None):
        super().__init__()
        self.runner = runner

    def _need_runner(self) -> bool:
        if self.runner is None:
            print("No scenario loaded. Use: load <filepath>")
            return False
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def do_load(self, arg):
        """Load a scenario from YAML: load <filepath>"""
        if not arg:
            print("Usage: load <filepath>")
            return
        try:
            self.runner = ScenarioRunner(load_scenario(arg.strip()))
            sc = self.runner.scenario
            print(f"Loaded: {sc.name} ({len(sc.events)} events)")
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            print(f"Error: {e}")

    def do_step(self, arg):
        """Apply the next event(s): step [n]"""
        if not self._need_runner():
            return
        try:
            n = int(arg) if arg.strip() else 1
        except ValueError:
            print("Usage: step [n]")
            return
        for _ in range(n):
            if self.runner.done:
                print("End of scenario.")
                break
            before = len(self.runner.host.order_log)
            try:
                event = self.runner.step()
            except ValueError as e:
                print(f"Error: {e}")
                break
            print(f"[{self.runner.cursor}] {event.describe()}")
            for entry in self.runner.host.order_log[before:]:
                print(f"    -> {entry}")

    def do_run(self, arg):
        """Apply all remaining events"""
        if not self._need_runner():
            return
        try:
            result = self.runner.run()
        except ValueError as e:
            print(f"Error: {e}")
            return
        print(f"Applied {result.events_applied} events, {len(result.issued)} orders issued.")

    def do_reset(self, arg):
        """Rewind the scenario to its initial state"""
        if self._need_runner():
            self.runner.reset()
            print("Reset.")

    def do_state(self, arg):
        """Show the tracker tables"""
        if self._need_runner():
            print_tables(self.runner.result())

    def do_orders(self, arg):
        """Show all issued orders"""
        if self._need_runner():
            print_orders(self.runner.result())

    def do_echoes(self, arg):
        """Show echoed messages"""
        if self._need_runner():
            print_echoes(self.runner.result())

    def do_quit(self, arg):
        """Exit"""
        return True

    do_exit = do_quit
    do_EOF = do_quit
