"""
Console interface for juicer simulator control and monitoring
"""

import logging
import sys
from typing import Optional, List, Dict, Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .main import JuicerSimulator, load_config, setup_logging
from .models import FruitType, FruitSize, RipenessLevel

logger = logging.getLogger(__name__)

HELP_ROWS = [
    ("start", "Start the juicer machine"),
    ("stop", "Stop the juicer machine"),
    ("feed <type> <size> <ripeness> [weight]", "Feed a fruit (e.g. feed orange medium ripe 150)"),
    ("status", "Show current machine status"),
    ("metrics", "Show production metrics"),
    ("clean", "Run cleaning cycle"),
    ("reset", "Reset the machine to idle after a fault"),
    ("maintenance", "Service the press and replace the filter"),
    ("help", "Show this help message"),
    ("quit / exit", "Exit the simulator"),
]


class ConsoleInterface:
    """Interactive command prompt driving one juicer machine"""

    PROMPT = "🍊 juicer> "

    def __init__(self, simulator: Optional[JuicerSimulator] = None,
                 console: Optional[Console] = None):
        self.simulator = simulator or JuicerSimulator(load_config())
        self.console = console or Console()
        self.running = False

    def show_banner(self):
        header_text = Text("🍊 Commercial Citrus Juicer Simulator", style="bold yellow")
        self.console.print(Panel(header_text, style="yellow"))

    def show_help(self):
        table = Table(title="📖 Available Commands", show_header=True)
        table.add_column("Command", style="cyan")
        table.add_column("Description", style="green")
        for command, description in HELP_ROWS:
            table.add_row(escape(command), description)
        self.console.print(table)
        self.console.print(f"📝 Fruit Types: {', '.join(FruitType.valid_types())}")
        self.console.print(f"📏 Sizes: {', '.join(FruitSize.valid_sizes())}")
        self.console.print(f"🎯 Ripeness: {', '.join(RipenessLevel.valid_levels())}")

    def process_command(self, line: str) -> bool:
        """Execute one command line; returns False when the user asked to quit"""
        parts = line.strip().lower().split()
        if not parts:
            return True

        command, args = parts[0], parts[1:]
        logger.debug(f"Console command: {command} {args}")

        if command in ("quit", "exit"):
            return False
        if command == "help":
            self.show_help()
        elif command == "start":
            self._report(self.simulator.start_juicing())
        elif command == "stop":
            self._report(self.simulator.stop_juicing())
        elif command == "clean":
            self._report(self.simulator.clean_machine())
        elif command == "reset":
            self._report(self.simulator.reset_machine())
        elif command == "maintenance":
            self._report(self.simulator.perform_maintenance())
        elif command == "status":
            self.display_status(self.simulator.get_status()["status"])
        elif command == "metrics":
            self.display_metrics(self.simulator.get_metrics())
        elif command == "feed":
            self.process_feed_command(args)
        else:
            self.console.print(f"❌ Unknown command: {escape(command)}. Type 'help' for available commands.",
                               style="red")
        return True

    def process_feed_command(self, args: List[str]):
        if len(args) < 3:
            self.console.print(escape("❌ Usage: feed <type> <size> <ripeness> [weight]"), style="red")
            self.console.print("   Example: feed orange medium ripe 150")
            return

        fruit_type, size, ripeness = args[0], args[1], args[2]
        checks = [
            (fruit_type, FruitType.valid_types(), "fruit type"),
            (size, FruitSize.valid_sizes(), "size"),
            (ripeness, RipenessLevel.valid_levels(), "ripeness"),
        ]
        for value, valid, label in checks:
            if value not in valid:
                self.console.print(f"❌ Invalid {label}. Choose from: {', '.join(valid)}", style="red")
                return

        weight = None
        if len(args) > 3:
            try:
                weight = float(args[3])
            except ValueError:
                self.console.print("❌ Weight must be a number of grams", style="red")
                return

        result = self.simulator.feed_fruit(fruit_type, size, ripeness, weight)
        if result["success"]:
            self.console.print(f"✅ {result['message']}", style="green")
            self.console.print(f"   🧃 Juice: {result['juice']}")
            self.console.print(f"   🗑️  Waste: {result['waste']}")
        else:
            self.console.print(f"❌ {escape(result['message'])}", style="red")

    def _report(self, result: Dict[str, Any]):
        if result["success"]:
            self.console.print(f"✅ {result['message']}", style="green")
        else:
            self.console.print(f"❌ {escape(result['message'])}", style="red")

    def display_status(self, status: Dict[str, Any]):
        table = Table(title=f"📊 Machine Status: {status['state'].upper()}", show_header=True)
        table.add_column("Component", style="cyan")
        table.add_column("Metric", style="yellow")
        table.add_column("Value", style="green")

        tank = status["juice_tank"]
        table.add_row("🧃 Juice Tank", "Volume", tank["volume"])
        table.add_row("", "Capacity", tank["capacity"])
        table.add_row("", "Full", f"{tank['percentage']}%")

        waste_bin = status["waste_bin"]
        table.add_row("🗑️  Waste Bin", "Weight", waste_bin["weight"])
        table.add_row("", "Capacity", waste_bin["capacity"])
        table.add_row("", "Full", f"{waste_bin['percentage']}%")

        press = status["press_unit"]
        table.add_row("⚙️  Press Unit", "State", press["state"])
        table.add_row("", "Press Count", str(press["press_count"]))
        table.add_row("", "Wear", f"{press['wear_percentage']}%")
        table.add_row("", "Efficiency", f"{press['efficiency_percentage']}%")

        filter_unit = status["filter_unit"]
        table.add_row("🔍 Filter Unit", "State", filter_unit["state"])
        table.add_row("", "Filter Count", str(filter_unit["filter_count"]))
        table.add_row("", "Clog Level", f"{filter_unit['clog_level']}%")
        table.add_row("", "Needs Cleaning", str(filter_unit["needs_cleaning"]))

        self.console.print(table)

    def display_metrics(self, result: Dict[str, Any]):
        metrics = result["metrics"]
        table = Table(title="📈 Production Metrics", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Fruits Processed", str(metrics["fruits_processed"]))
        table.add_row("Total Juice", f"{round(metrics['total_juice_ml'], 2)} ml")
        table.add_row("Total Waste", f"{round(metrics['total_waste_grams'], 2)} g")
        table.add_row("Cleaning Cycles", str(metrics["cleaning_cycles"]))
        table.add_row("Errors", str(metrics["errors"]))
        table.add_row("Efficiency", f"{result['efficiency']}%")

        self.console.print(table)

    def run(self):
        """Read commands until quit/exit or end of input"""
        self.show_banner()
        self.show_help()
        self.running = True

        while self.running:
            try:
                line = self.console.input(f"\n{self.PROMPT}")
            except (EOFError, KeyboardInterrupt):
                break
            self.running = self.process_command(line)

        self.running = False
        self.console.print("\n👋 Goodbye! Thanks for using the juicer simulator!", style="bold")


def main():
    """Main console interface entry point"""
    config = load_config()
    setup_logging(config["logging"]["level"])
    ConsoleInterface(JuicerSimulator(config)).run()

if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
