"""Main entry point for the Graylog alert → Jira bridge.

Loads environment variables, validates configuration, reads one alert
notification (JSON) and runs it through the LangGraph pipeline to create a
deduplicated Jira issue.
"""
from dotenv import load_dotenv
import argparse
import json
import os
import sys

# Load environment variables first, before any other imports
load_dotenv()

from graylog_jira.config import reload_config
from graylog_jira.context import AlertContext
from graylog_jira.errors import ConfigurationError, GraylogJiraError
from graylog_jira.jira.client import JiraClient
from graylog_jira.run_config import RunConfig
from graylog_jira.utils.logger import log_alert_progress, log_error, log_info, set_level

parser = argparse.ArgumentParser(description="Create a Jira issue from a triggered Graylog stream alert.")
group = parser.add_mutually_exclusive_group()
group.add_argument('--dry-run', dest='auto_create_ticket', action='store_false', help='Run in dry-run mode (do not create tickets).')
group.add_argument('--real', dest='auto_create_ticket', action='store_true', help='Run in real mode (create tickets).')
parser.add_argument('--payload', type=str, help='Path to the alert notification JSON (default: stdin).')
parser.add_argument('--check', action='store_true', help='Run the Jira health check and exit.')

parser.set_defaults(auto_create_ticket=os.getenv('AUTO_CREATE_TICKET', 'false').lower() == 'true')

args = parser.parse_args()

# Apply parsed arguments to environment variables
os.environ['AUTO_CREATE_TICKET'] = 'true' if args.auto_create_ticket else 'false'

config = reload_config()
set_level(config.log_level)
config.log_configuration()

try:
    config.check_configuration()
except ConfigurationError as e:
    log_error("Configuration validation failed", field=e.field, error=str(e))
    print("❌ Configuration issues found:")
    for issue in config.validate_configuration():
        print(f"  - {issue}")
    print("\nPlease fix these issues and try again.")
    sys.exit(1)

if args.check:
    from graylog_jira.healthcheck import run_health_checks

    all_healthy, _ = run_health_checks(config)
    sys.exit(0 if all_healthy else 1)

try:
    if args.payload:
        with open(args.payload, "r", encoding="utf-8") as f:
            payload = json.load(f)
    else:
        payload = json.load(sys.stdin)
    context = AlertContext.from_payload(payload)
except (OSError, ValueError) as e:
    log_error("Could not read alert payload", error=str(e))
    print(f"❌ Invalid alert payload: {e}")
    sys.exit(2)

run_config = RunConfig.from_config(config)
if run_config.auto_create_ticket:
    log_info("Real mode: a Jira issue will be created unless a duplicate exists.")
else:
    log_info("Dry-run mode: Jira ticket creation is disabled.")

from graylog_jira.pipeline import process_alert

try:
    outcome = process_alert(context, run_config, JiraClient.from_config(config))
except GraylogJiraError as e:
    log_error("Alert processing failed", error=str(e), cause=str(e.__cause__) if e.__cause__ else None)
    print(f"❌ {e}")
    sys.exit(1)

print(json.dumps(outcome.to_dict(), indent=2))
log_alert_progress("Bridge execution finished")
