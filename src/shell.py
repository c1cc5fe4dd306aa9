#!/usr/bin/env python3
"""Interactive command shell for the savings allocator.

This module provides an interactive shell that loads the saved allocation
at startup, lets you change salary, tax inputs and allocations, and renders
the resulting take-home breakdown after every change.

Usage:
    python src/shell.py [--data-dir DIR] [--tax-year YEAR] [--log-level LEVEL]

Commands:
    salary <dollars>              - Set gross annual salary
    taxrate <percent>             - Set effective tax rate (0-50)
    premium <dollars>             - Set monthly health insurance premium
    coverage <individual|family>  - Set HSA coverage type
    set <allocation> <percent>    - Set an allocation as percent of gross
    show                          - Show dashboard and breakdown
    render [mode]                 - Render a single view
    limits                        - Show IRS limit status
    get <fields>                  - Query breakdown fields
    fields                        - List all available fields
    state                         - Show the raw saved inputs
    reset                         - Reset all inputs to defaults
    help                          - Show help message
    exit/quit                     - Exit the shell

Examples:
    > salary 100,000
    > set traditional401k 25
    > coverage family
    > get take_home_annual, savings_rate
"""

import sys
import os
import cmd
import argparse
import logging
import readline
from dataclasses import fields as dataclass_fields

# Configure readline for tab completion
# This must be done before the cmd.Cmd class is used
try:
    if 'libedit' in readline.__doc__:
        # macOS uses libedit which has different syntax
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
except (AttributeError, TypeError):
    pass  # readline might not be fully available

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from tax.IRSLimits import load_irs_limits
from calc.allocation_planner import AllocationPlanner
from calc.conversions import parse_number, percent_to_dollars
from model.AllocationState import ALLOCATION_KINDS, HSA_COVERAGE_TYPES
from model.Breakdown import Breakdown
from model.field_metadata import FIELD_METADATA, get_short_name, get_description, get_label
from storage.allocation_store import JsonFileAllocationStore, load_state, DEFAULT_DATA_DIR
from render.renderers import RENDERER_REGISTRY, format_currency, format_percent


logger = logging.getLogger(__name__)

# Environment overrides for configuration
DATA_DIR_ENV = 'SAVINGS_ALLOCATOR_DATA_DIR'
TAX_YEAR_ENV = 'SAVINGS_ALLOCATOR_TAX_YEAR'

# Fields reported as percents rather than dollars
PERCENT_FIELDS = ('savings_rate',)


def build_planner(data_dir: str = None, tax_year: int = None) -> AllocationPlanner:
    """Load IRS limits and the saved state and wire up a planner.

    Args:
        data_dir: Directory holding the saved record. Defaults to
            $SAVINGS_ALLOCATOR_DATA_DIR, then allocation-data/ at the repo root.
        tax_year: Tax year of IRS limits. Defaults to $SAVINGS_ALLOCATOR_TAX_YEAR,
            then the reference file's default year.

    Returns:
        An AllocationPlanner backed by a JSON file store.
    """
    data_dir = data_dir or os.environ.get(DATA_DIR_ENV) or DEFAULT_DATA_DIR
    if tax_year is None and os.environ.get(TAX_YEAR_ENV):
        tax_year = int(os.environ[TAX_YEAR_ENV])

    limits = load_irs_limits(tax_year)
    store = JsonFileAllocationStore(data_dir)
    state = load_state(store)
    return AllocationPlanner(state, limits, store)


def get_breakdown_fields() -> list:
    """Get list of scalar field names from the Breakdown dataclass."""
    return [f.name for f in dataclass_fields(Breakdown) if f.name in FIELD_METADATA]


def format_value(field_name: str, value) -> str:
    """Format a breakdown value for display."""
    if field_name in PERCENT_FIELDS:
        return format_percent(value)
    return format_currency(value)


class AllocationShell(cmd.Cmd):
    """Interactive shell for editing allocations and viewing the breakdown."""

    intro = """
Savings Allocation Shell
========================
Type 'help' for available commands.
Type 'show' to see your current breakdown.
Type 'exit' or 'quit' to exit.
"""
    prompt = '> '

    def __init__(self, planner: AllocationPlanner):
        super().__init__()
        self.planner = planner
        self.available_fields = get_breakdown_fields()

    def preloop(self):
        """Set up readline before entering the command loop."""
        try:
            # Set completer delimiters - space and comma separate arguments
            readline.set_completer_delims(' \t\n,')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
        except (AttributeError, TypeError):
            pass  # readline might not be fully available

    def _print_summary(self):
        """Print the one-line summary shown after every change."""
        b = self.planner.calculate_breakdown()
        print(f"Take-home: {format_currency(b.take_home_monthly)}/mo "
              f"({format_currency(b.take_home_annual)}/yr)   "
              f"Savings rate: {format_percent(b.savings_rate)}")

    def do_salary(self, arg: str):
        """Set gross annual salary.

        Usage: salary <dollars>

        Thousands separators and a leading $ are accepted; unreadable
        input is treated as 0.

        Examples:
            salary 100000
            salary $85,000
        """
        if not arg.strip():
            print(f"Gross salary: {format_currency(self.planner.state.gross_annual_salary)}/yr "
                  f"({format_currency(self.planner.state.gross_annual_salary / 12)}/month)")
            return
        salary = self.planner.set_gross_salary(arg.strip())
        print(f"Gross salary set to {format_currency(salary)}/yr ({format_currency(salary / 12)}/month)")
        self._print_summary()

    def do_taxrate(self, arg: str):
        """Set the effective tax rate.

        Usage: taxrate <percent>

        The rate is clamped to 0-50%.
        """
        if not arg.strip():
            print(f"Effective tax rate: {format_percent(self.planner.state.effective_tax_rate)}")
            return
        rate = self.planner.set_tax_rate(arg.strip())
        print(f"Effective tax rate set to {format_percent(rate)}")
        self._print_summary()

    def do_premium(self, arg: str):
        """Set the monthly health insurance premium (pre-tax).

        Usage: premium <dollars per month>
        """
        if not arg.strip():
            print(f"Health insurance premium: {format_currency(self.planner.state.health_insurance_premium)}/month")
            return
        premium = self.planner.set_health_insurance_premium(arg.strip())
        print(f"Health insurance premium set to {format_currency(premium)}/month")
        self._print_summary()

    def do_coverage(self, arg: str):
        """Set HSA coverage type.

        Usage: coverage <individual|family>

        Switching to individual coverage lowers an HSA allocation that
        exceeds the individual limit.
        """
        if not arg.strip():
            print(f"HSA coverage: {self.planner.state.hsa_coverage_type}")
            return
        previous_hsa = self.planner.state.allocations['hsa']
        try:
            coverage = self.planner.set_hsa_coverage_type(arg.strip())
        except ValueError as e:
            print(f"Error: {e}")
            return
        print(f"HSA coverage set to {coverage} (limit {format_currency(self.planner.get_hsa_limit())}/yr)")
        current_hsa = self.planner.state.allocations['hsa']
        if current_hsa != previous_hsa:
            print(f"HSA allocation lowered from {format_percent(previous_hsa)} to {format_percent(current_hsa)}")
        self._print_summary()

    def do_set(self, arg: str):
        """Set an allocation as a percent of gross salary.

        Usage: set <allocation> <percent>

        Allocations: traditional401k, roth401k, hsa, rothIRA,
                     emergencyFund, taxableBrokerage

        The value is clamped to 0-100% and to the IRS limit for the
        allocation. Traditional and Roth 401(k) share one limit.

        Examples:
            set traditional401k 10
            set rothIRA 7.5
        """
        parts = arg.split()
        if len(parts) != 2:
            print("Usage: set <allocation> <percent>")
            print(f"Allocations: {', '.join(ALLOCATION_KINDS)}")
            return

        kind, requested = parts
        try:
            applied = self.planner.set_allocation(kind, requested)
        except ValueError as e:
            print(f"Error: {e}")
            return

        dollars = percent_to_dollars(self.planner.state, applied)
        print(f"{get_label(kind)} set to {format_percent(applied)} "
              f"({format_currency(dollars)}/yr, {format_currency(dollars / 12)}/mo)")
        requested_value = parse_number(requested)
        if applied < requested_value:
            print(f"  Limited from {format_percent(requested_value)} to {format_percent(applied)}")
        if self.planner.is_at_limit(kind):
            print("  At IRS limit")
        self._print_summary()

    def do_show(self, arg: str):
        """Show the dashboard and the full income breakdown."""
        RENDERER_REGISTRY['Dashboard']().render(self.planner)
        RENDERER_REGISTRY['Breakdown']().render(self.planner)

    def do_render(self, arg: str):
        """Render a single view.

        Usage: render [mode]

        If no mode is specified, shows available render modes.
        """
        mode = arg.strip()
        if not mode:
            print("\nAvailable render modes:")
            for name, renderer_class in RENDERER_REGISTRY.items():
                print(f"  {name:<14} {renderer_class.__doc__.strip().splitlines()[0]}")
            print()
            return

        # Case-insensitive match
        matches = [name for name in RENDERER_REGISTRY if name.lower() == mode.lower()]
        if not matches:
            print(f"Error: Unknown render mode '{mode}'")
            print(f"Available modes: {', '.join(RENDERER_REGISTRY)}")
            return
        RENDERER_REGISTRY[matches[0]]().render(self.planner)

    def do_limits(self, arg: str):
        """Show IRS limit status and each allocation's current ceiling."""
        RENDERER_REGISTRY['Limits']().render(self.planner)
        RENDERER_REGISTRY['Allocations']().render(self.planner)

    def do_get(self, arg: str):
        """Query field(s) from the breakdown.

        Usage: get <fields>

        Arguments:
            fields - Comma-separated list of field names

        Examples:
            get take_home_annual
            get taxable_income, estimated_taxes, savings_rate
        """
        field_names = [f.strip() for f in arg.split(',') if f.strip()]
        if not field_names:
            print("Error: Please specify at least one field to query.")
            print("Usage: get <fields>")
            print("Example: get take_home_annual, savings_rate")
            return

        invalid_fields = [f for f in field_names if f not in self.available_fields]
        if invalid_fields:
            print(f"Error: Unknown field(s): {', '.join(invalid_fields)}")
            print("Use 'fields' command to see available field names.")
            return

        b = self.planner.calculate_breakdown()
        width = max(len(get_short_name(f)) for f in field_names) + 1
        print()
        for field_name in field_names:
            label = get_short_name(field_name) + ':'
            print(f"  {label:<{width}} {format_value(field_name, getattr(b, field_name)):>14}")
        print()

    def do_fields(self, arg: str):
        """List all available fields that can be queried.

        Usage: fields [field_name]

        If a field name is provided, shows detailed info for that field.
        """
        if arg.strip():
            field_name = arg.strip()
            if field_name not in self.available_fields:
                print(f"Error: Unknown field '{field_name}'")
                print("Use 'fields' without arguments to see all available fields.")
                return

            info = FIELD_METADATA[field_name]
            print(f"\n{field_name}:")
            print(f"  Short name: {info.short_name}")
            print(f"  Description: {info.description}")
            print()
            return

        print("\nAvailable breakdown fields:")
        print("=" * 70)
        for field_name in self.available_fields:
            print(f"  {field_name:<24} [{get_short_name(field_name):<14}] {get_description(field_name)}")
        print()

    def do_state(self, arg: str):
        """Show the current inputs."""
        state = self.planner.state
        print()
        print(f"  {'Gross salary:':<24} {format_currency(state.gross_annual_salary)}/yr")
        print(f"  {'Effective tax rate:':<24} {format_percent(state.effective_tax_rate)}")
        print(f"  {'Health insurance:':<24} {format_currency(state.health_insurance_premium)}/month")
        print(f"  {'HSA coverage:':<24} {state.hsa_coverage_type}")
        for kind in ALLOCATION_KINDS:
            print(f"  {get_label(kind) + ':':<24} {format_percent(state.allocations.get(kind, 0.0))}")
        print()

    def do_reset(self, arg: str):
        """Reset all inputs to defaults and delete saved data.

        Usage: reset [-y]

        Asks for confirmation unless -y is given.
        """
        if arg.strip() not in ('-y', '--yes'):
            confirm = input("Reset all data? This cannot be undone. [y/N]: ").strip().lower()
            if confirm not in ('y', 'yes'):
                print("Reset cancelled.")
                return
        self.planner.reset()
        print("All data reset to defaults.")

    def do_help(self, arg: str):
        """Show help for available commands."""
        if arg:
            # Show help for specific command
            super().do_help(arg)
        else:
            print("""
Available Commands:
==================

  salary <dollars>
      Set gross annual salary. Accepts 100000, 100,000 or $100,000.

  taxrate <percent>
      Set the flat effective tax rate (clamped to 0-50%).

  premium <dollars>
      Set the monthly health insurance premium (deducted pre-tax).

  coverage <individual|family>
      Set HSA coverage type. This changes the HSA limit.

  set <allocation> <percent>
      Set an allocation as a percent of gross salary.
      Allocations: traditional401k, roth401k, hsa, rothIRA,
                   emergencyFund, taxableBrokerage
      Values are clamped to the IRS limits; traditional and Roth 401(k)
      share one combined limit.

      Examples:
        set traditional401k 10
        set roth401k 5
        set emergencyFund 3

  show
      Show the dashboard and the full gross-to-take-home breakdown.

  render [mode]
      Render a single view. Modes: Breakdown, Dashboard, Allocations, Limits.

  limits
      Show IRS limit banners and each allocation's current ceiling.

  get <fields>
      Query one or more breakdown fields (comma-separated).

  fields [field_name]
      List all available field names, or describe one field.

  state
      Show the current inputs.

  reset [-y]
      Reset all inputs to defaults and delete saved data.

  help [command]
      Show this help message or help for a specific command.

  exit, quit
      Exit the shell.
""")

    def do_exit(self, arg: str):
        """Exit the shell."""
        print("Goodbye!")
        return True

    def do_quit(self, arg: str):
        """Exit the shell."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str):
        """Handle Ctrl+D to exit."""
        print()  # Print newline for clean exit
        return self.do_exit(arg)

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def default(self, line: str):
        """Handle unknown commands."""
        print(f"Unknown command: {line}")
        print("Type 'help' for available commands.")

    def complete_set(self, text, line, begidx, endidx):
        """Tab completion for allocation names (first argument only)."""
        if len(line[:begidx].split()) > 1:
            return []
        return [k for k in ALLOCATION_KINDS if k.lower().startswith(text.lower())]

    def complete_coverage(self, text, line, begidx, endidx):
        return [c for c in HSA_COVERAGE_TYPES if c.startswith(text.lower())]

    def complete_render(self, text, line, begidx, endidx):
        return [m for m in RENDERER_REGISTRY if m.lower().startswith(text.lower())]

    def complete_get(self, text, line, begidx, endidx):
        """Tab completion for the get command.

        Matches field names containing the text anywhere (case-insensitive substring match).
        """
        if not text:
            return self.available_fields
        text_lower = text.lower()
        return [f for f in self.available_fields if text_lower in f.lower()]

    def complete_fields(self, text, line, begidx, endidx):
        return self.complete_get(text, line, begidx, endidx)

    def complete_help(self, text, line, begidx, endidx):
        """Tab completion for the help command."""
        commands = ['salary', 'taxrate', 'premium', 'coverage', 'set', 'show', 'render',
                    'limits', 'get', 'fields', 'state', 'reset', 'exit', 'quit']
        return [c for c in commands if c.startswith(text)]


def main():
    parser = argparse.ArgumentParser(
        description='Savings allocation calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  SAVINGS_ALLOCATOR_DATA_DIR   Directory for saved allocation data
  SAVINGS_ALLOCATOR_TAX_YEAR   Tax year of IRS limits to apply

Examples:
  python src/shell.py
  python src/shell.py --tax-year 2025
  python src/shell.py --data-dir /tmp/allocations --log-level INFO
        """
    )
    parser.add_argument('--data-dir', '-d', help='Directory for saved allocation data')
    parser.add_argument('--tax-year', '-y', type=int, help='Tax year of IRS limits to apply')
    parser.add_argument('--log-level', '-l', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        planner = build_planner(args.data_dir, args.tax_year)
    except (OSError, ValueError) as e:
        print(f"Error loading IRS limits: {e}")
        sys.exit(1)

    logger.info("Using %s IRS limits", planner.limits.tax_year)
    shell = AllocationShell(planner)
    shell.cmdloop()


if __name__ == "__main__":
    main()
