"""Drive the dialogue engine from the terminal, one caller turn per line.

Prints the opening greeting, then reads caller utterances from stdin and
prints the detected intent, the state transition, and the response text
until the script reaches ``closing`` or input ends.

Usage:
    python scripts/simulate_call.py --company "AIコールシステム株式会社" --representative 佐藤
"""

import argparse
import sys

from cs_common.models import ConversationProfile

from dialogue.main import startup
from dialogue.state_machine import ConversationStateMachine


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the call simulator."""
    parser = argparse.ArgumentParser(description="Simulate a scripted call")
    parser.add_argument("--company", type=str, default="", help="Calling company name")
    parser.add_argument("--representative", type=str, default="", help="Representative name")
    parser.add_argument("--service", type=str, default="", help="Service name")
    parser.add_argument("--description", type=str, default="", help="Service description")
    parser.add_argument("--call-id", type=str, default="simulated", help="Call id for log lines")
    return parser.parse_args()


def main() -> None:
    """Run an interactive simulated call."""
    args = parse_args()
    engine = startup()
    profile = ConversationProfile(
        company_name=args.company,
        representative_name=args.representative,
        service_name=args.service,
        service_description=args.description,
    )
    machine = ConversationStateMachine(call_id=args.call_id)

    print(f"AI> {engine.open_call(machine, profile)}")
    for line in sys.stdin:
        turn = engine.handle_turn(line.rstrip("\n"), machine, profile)
        print(
            f"   [{turn.classification.intent.value} {turn.classification.confidence:.2f}] "
            f"{turn.previous_state.value} -> {turn.next_state.value} ({turn.action.value})"
        )
        print(f"AI> {turn.text}")
        if machine.is_closed:
            break


if __name__ == "__main__":
    main()
