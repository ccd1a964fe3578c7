import json
import argparse
from colorama import init, Fore, Style

COLORS = {
    "DEBUG": Fore.BLUE,
    "INFO": Fore.GREEN,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.RED + Style.BRIGHT
}

LEVEL_PRIORITIES = {
    "DEBUG": 0,
    "INFO": 1,
    "WARNING": 2,
    "ERROR": 3,
    "CRITICAL": 4
}

CONTEXT_FIELDS = ["operation", "request_id", "search_id", "lookup_id", "status", "reason"]


def format_log_entry(entry):
    try:
        data = json.loads(entry)
    except json.JSONDecodeError:
        return entry  # Return the original line if not valid JSON

    level = data.get("level", "INFO")
    color = COLORS.get(level, "")
    reset = Style.RESET_ALL

    timestamp = data.get("timestamp", "")
    message = data.get("message", "")

    extra = {k: v for k, v in data.items() if k not in ["timestamp", "level", "logger", "message"]}

    # Extract key context fields
    context = [f"{field}={extra[field]}" for field in CONTEXT_FIELDS if field in extra]

    # Format routing metrics if present
    if "metrics" in extra:
        metrics = extra["metrics"]
        context.append(f"lookups={metrics.get('total_requests', 0)}")
        context.append(f"failed={metrics.get('failed_requests', 0)}")
        context.append(f"no_key={metrics.get('missing_credential', 0)}")

    context_str = " | ".join(context)

    # Full formatted log line
    return f"{timestamp} {color}{level.ljust(8)}{reset} {message} [{context_str}]"


def should_display(line, level=None, text=None, operation=None):
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return True

    if level and LEVEL_PRIORITIES.get(data.get("level", ""), 0) < LEVEL_PRIORITIES[level]:
        return False
    if text and text.lower() not in line.lower():
        return False
    if operation and data.get("operation", "") != operation:
        return False
    return True


def main():
    init()  # Initialize colorama

    parser = argparse.ArgumentParser(description="Pretty print listing_search JSON log files")
    parser.add_argument("logfile", help="Path to the JSON log file")
    parser.add_argument("-l", "--level", choices=list(LEVEL_PRIORITIES),
                        help="Minimum log level to display")
    parser.add_argument("-f", "--filter", help="Only show logs containing this text")
    parser.add_argument("-o", "--operation", help="Filter by operation type")
    args = parser.parse_args()

    with open(args.logfile, 'r') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            if should_display(line, args.level, args.filter, args.operation):
                print(format_log_entry(line))

if __name__ == "__main__":
    main()
