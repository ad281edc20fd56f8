"""
BillChat - Split a bill by describing who ate what

python3 main.py                          # Interactive CLI mode
python3 main.py receipt.json             # Load a receipt and start CLI
python3 main.py --demo                   # Start with the demo receipt
python3 main.py receipt.txt --say "Julia got the burger" --say "Peter got the fries"
"""

import argparse
import json
import logging
import sys

from assignment_store import AssignmentStore
from bill_splitter import split_summary
from cli_interface import BillChatCLI
from conversation import ConversationEngine, EmptyUtteranceError
from data_models import AnalysisOk
from receipt_parser import demo_receipt, load_receipt
from utils import setup_logging

logger = logging.getLogger(__name__)


def quick_process(store: AssignmentStore, utterances: list[str], as_json: bool = False) -> int:
    """Run utterances non-interactively and print the split"""
    engine = ConversationEngine(store)
    for text in utterances:
        try:
            turn = engine.process(text)
        except EmptyUtteranceError:
            logger.warning("Skipping empty utterance")
            continue
        if not as_json:
            print(f"> {text}\n  {turn.response}")

    summary = split_summary(store.people, store.receipt)
    if as_json:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0

    currency = summary.get('currency', '')
    print()
    for person in summary['people']:
        print(f"{person['name']:20} {person['total']:8.2f} {currency}")
    rec = summary['reconciliation']
    status = "match" if rec['is_match'] else f"off by {rec['difference']:+.2f}"
    print(f"\nCalculated {rec['calculated_total']:.2f} vs receipt {rec['receipt_total']:.2f} ({status})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='BillChat - Split a bill by describing who ate what',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Interactive mode
  python main.py receipt.json                     # Load receipt then interactive
  python main.py --demo --say "Julia got the wine" # One-shot split
        """
    )

    parser.add_argument(
        'receipt',
        nargs='?',
        help='Receipt file to load (.json analysis reply or plain text)'
    )
    parser.add_argument(
        '--demo',
        action='store_true',
        help='Use the built-in demo receipt'
    )
    parser.add_argument(
        '--say',
        action='append',
        default=[],
        metavar='TEXT',
        help='Utterance to process without the interactive menu (repeatable)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the one-shot split as JSON'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='BillChat 1.0'
    )

    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    store = AssignmentStore()
    if args.receipt:
        if not store.apply_analysis(load_receipt(args.receipt)):
            print(f"❌ {store.error_message}")
            return 1
    elif args.demo:
        store.apply_analysis(AnalysisOk(demo_receipt()))

    if args.say:
        if store.receipt is None:
            print("❌ --say needs a receipt file or --demo")
            return 1
        return quick_process(store, args.say, as_json=args.json)

    cli = BillChatCLI(store)
    if store.receipt is not None:
        cli.display_receipt()
    try:
        cli.run()
    except (KeyboardInterrupt, EOFError):
        print("\n\n👋 Goodbye!")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except (KeyboardInterrupt, EOFError):
        print("\n\n👋 Goodbye!")
        sys.exit(0)
