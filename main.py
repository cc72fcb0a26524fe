#!/usr/bin/env python3
"""
Main entry point for the Assembly Slot Scheduler

Runs the API server, processes a single form submission, runs the daily
check, populates future schedule rows, or analyzes the schedule.
"""

import sys
import json
import logging
from datetime import date, datetime
from pathlib import Path

# Add the project directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import Config
from slot_scheduler.scheduler.slot_scheduler import SlotScheduler
from slot_scheduler.scheduler.time_window import TimeWindowPolicy
from slot_scheduler.sheets.grid_populator import populate_schedule
from slot_scheduler.sheets.schedule_grid import ScheduleGrid
from slot_scheduler.sheets.sheet_store import GoogleSheetStore
from utils.logger import SlotSchedulerLogger
from utils.schedule_analyzer import ScheduleAnalyzer

logger = logging.getLogger(__name__)


def process_submission(payload, config: Config = None):
    """
    Schedule one form submission.

    Args:
        payload (dict): Google Form namedValues wrapper or a flat submission

    Returns:
        dict: result with a ``status`` of scheduled, not_found, invalid or error
    """
    scheduler = SlotScheduler(config or Config.from_env())
    return scheduler.process_submission(payload)


def run_daily_check(config: Config = None):
    """Run one reconciliation cycle and return its report as a dict"""
    scheduler = SlotScheduler(config or Config.from_env())
    return scheduler.run_daily_check().to_dict()


def run_server(config: Config, host=None, port=None):
    """Run the Flask API server"""
    from slot_scheduler.api.flask_server import SlotSchedulerAPI

    logger.info("Starting Assembly Slot Scheduler...")
    try:
        api = SlotSchedulerAPI(config)
        api.run(host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")


def run_smoke_tests(api_url="http://localhost:5000"):
    """Run smoke tests against a running server"""
    from slot_scheduler.api.smoke_client import SlotSchedulerSmokeClient, print_results

    logger.info(f"Running smoke tests against {api_url}")
    client = SlotSchedulerSmokeClient(api_url)
    results = client.run_smoke_suite()
    print_results(results)
    return results


def _parse_date(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def main(argv=None):
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(description='Assembly Slot Scheduler')
    parser.add_argument('--log-level', default='INFO', help='Logging level')
    parser.add_argument('--log-file', help='Also log to this file')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Server command
    server_parser = subparsers.add_parser('server', help='Run API server')
    server_parser.add_argument('--host', help='Host to bind to')
    server_parser.add_argument('--port', type=int, help='Port to bind to')

    # Submit command (single submission)
    submit_parser = subparsers.add_parser('submit', help='Process a single form submission')
    submit_parser.add_argument('input_file', help='Input JSON file')
    submit_parser.add_argument('--output', help='Output JSON file')

    # Daily check
    subparsers.add_parser('reconcile', help='Run the daily displacement check and reminders')

    # Populate future rows
    populate_parser = subparsers.add_parser('populate', help='Append Empty rows for upcoming days')
    populate_parser.add_argument('--start', type=_parse_date, default=date.today(), help='First date (YYYY-MM-DD)')
    populate_parser.add_argument('--days', type=int, default=14, help='Number of days to cover')

    # Analyze
    analyze_parser = subparsers.add_parser('analyze', help='Summarize the schedule')
    analyze_parser.add_argument('--start', type=_parse_date, default=date.today(), help='First date (YYYY-MM-DD)')
    analyze_parser.add_argument('--days', type=int, default=7, help='Number of days to cover')

    # Smoke tests
    smoke_parser = subparsers.add_parser('smoke', help='Run smoke tests against a running server')
    smoke_parser.add_argument('--url', default='http://localhost:5000', help='API URL to test')

    args = parser.parse_args(argv)
    SlotSchedulerLogger.setup_logging(log_level=args.log_level, log_file=args.log_file)

    if args.command is None:
        parser.print_help()
        return 0

    config = Config.from_env()

    if args.command == 'server':
        run_server(config, host=args.host, port=args.port)

    elif args.command == 'submit':
        with open(args.input_file, 'r') as f:
            payload = json.load(f)

        result = process_submission(payload, config)

        if args.output:
            with open(args.output, 'w') as f:
                json.dump(result, f, indent=2)
        else:
            print(json.dumps(result, indent=2))
        return 0 if result.get("status") == "scheduled" else 1

    elif args.command == 'reconcile':
        report = run_daily_check(config)
        print(json.dumps(report, indent=2))
        return 1 if report["errors"] else 0

    elif args.command == 'populate':
        store = GoogleSheetStore(config)
        appended = populate_schedule(store, TimeWindowPolicy(config), config, args.start, args.days)
        print(f"Appended {appended} rows")

    elif args.command == 'analyze':
        policy = TimeWindowPolicy(config)
        grid = ScheduleGrid(GoogleSheetStore(config), config)
        analyzer = ScheduleAnalyzer(grid, policy, config)
        analyzer.display(analyzer.analyze(args.start, args.days))

    elif args.command == 'smoke':
        results = run_smoke_tests(api_url=args.url)
        return 0 if results["summary"]["failed"] == 0 else 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
