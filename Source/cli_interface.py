"""
CLI Interface module for BillChat
Command-line front end for chatting through who ate what
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from assignment_store import AssignmentStore
from bill_splitter import final_total, person_subtotal, reconcile, split_summary, tax_share, tip_share
from config import EXPORT_DIR
from constants import MATCH_NOTE, MISMATCH_NOTE
from conversation import ConversationEngine, EmptyUtteranceError
from data_models import AnalysisOk, SessionState
from receipt_parser import ReceiptParser, demo_receipt, load_receipt
from utils import (
    clean_text_for_display,
    ensure_directory_exists,
    format_currency,
    try_parse_float,
    try_parse_int,
    validate_menu_choice,
)

logger = logging.getLogger(__name__)


class BillChatCLI:
    """Command-line interface for BillChat"""

    def __init__(self, store: Optional[AssignmentStore] = None):
        self.store = store or AssignmentStore()
        self.engine = ConversationEngine(self.store)

    def _money(self, amount: float) -> str:
        currency = self.store.receipt.currency if self.store.receipt else 'USD'
        return format_currency(amount, currency)

    def display_banner(self):
        """Display application banner"""
        print("\n" + "="*60)
        print("🍽️  BILLCHAT - Who Ate What")
        print("Tell it who got what, get everyone's fair share")
        print("="*60)

    def load_receipt_file(self, path: str) -> bool:
        """Load a receipt from a JSON or text file"""
        ok = self.store.apply_analysis(load_receipt(path))
        if ok:
            self.display_receipt()
        else:
            print(f"\n⚠ {self.store.error_message}")
        return ok

    def load_demo_receipt(self):
        self.store.apply_analysis(AnalysisOk(demo_receipt()))
        self.display_receipt()

    def enter_receipt_text(self):
        """Type or paste receipt lines, finished by an empty line"""
        print("\nPaste receipt lines (empty line to finish):")
        lines = []
        while True:
            line = input()
            if not line.strip():
                break
            lines.append(line)

        receipt = ReceiptParser().parse('\n'.join(lines))
        if not receipt.items:
            print("\n⚠ No items detected in receipt")
            return
        self.store.apply_analysis(AnalysisOk(receipt))
        self.display_receipt()

    def display_receipt(self):
        """Display loaded receipt"""
        receipt = self.store.receipt
        if not receipt or not receipt.items:
            print("\n⚠ No items detected in receipt")
            return

        unassigned_ids = {item.id for item in self.store.unassigned_items}

        print("\n" + "="*50)
        print("📋 RECEIPT ITEMS")
        print("="*50)

        for i, item in enumerate(receipt.items, 1):
            owners = [p.name for p in self.store.people if p.has_item(item.id)]
            assigned = ', '.join(owners) if item.id not in unassigned_ids else 'Unassigned'
            print(f"{i:2}. {item.name[:30]:30} {item.quantity:2}x {item.price:6.2f} [{assigned}]")

        print("-"*50)
        print(f"{'SUBTOTAL:':40} {receipt.subtotal:7.2f}")
        print(f"{'TAX:':40} {receipt.tax:7.2f}")
        print(f"{'TIP:':40} {receipt.tip:7.2f}")
        print(f"{'TOTAL:':40} {receipt.total:7.2f} {receipt.currency}")

    def display_message(self, message):
        speaker = "You" if message.is_user else "BillChat"
        print(f"{speaker:>9}: {clean_text_for_display(message.text, max_length=500)}")

    def chat(self):
        """Free-text assignment loop"""
        if self.store.receipt is None:
            print("\n⚠ Load a receipt first")
            return

        self.engine.ensure_welcome()
        print("\n" + "="*50)
        print("💬 WHO GOT WHAT? (empty line to go back)")
        print("="*50)
        for message in self.store.conversation:
            self.display_message(message)

        while True:
            text = input("\n> ")
            try:
                self.engine.process(text)
            except EmptyUtteranceError:
                break
            self.display_message(self.store.conversation[-1])

            if self.store.state is SessionState.COMPLETE:
                self.display_summary()

    def _choose(self, options, prompt: str):
        for i, option in enumerate(options, 1):
            print(f"{i}. {option}")
        idx = try_parse_int(input(prompt))
        if idx is None or not 1 <= idx <= len(options):
            print("Invalid selection")
            return None
        return idx - 1

    def assign_unassigned(self):
        """Assign a leftover item to someone by hand"""
        unassigned = self.store.unassigned_items
        if not unassigned:
            print("\n✓ Every item is assigned")
            return

        print("\n" + "="*50)
        print("🔍 UNASSIGNED ITEMS")
        print("="*50)
        idx = self._choose([f"{item.name} - {self._money(item.price)}" for item in unassigned],
                           "Select item number: ")
        if idx is None:
            return
        self.store.select_item(unassigned[idx])

        name = input("Who had it? ").strip()
        if not name:
            self.store.clear_selection()
            return
        share = try_parse_float(input("Share of it (0-1, default 1): ") or "1")
        if share is None or not 0.0 <= share <= 1.0:
            print("Invalid share")
            self.store.clear_selection()
            return

        person = self.store.find_or_create_person(name)
        self.store.assign_item(self.store.selected_item, person.name, share_percentage=share)
        print(f"✓ Assigned {self.store.selected_item.name} to {person.name}")
        self.store.clear_selection()

    def remove_assignment(self):
        """Take an item back from someone"""
        people = [p for p in self.store.people if p.assignments]
        if not people:
            print("\n⚠ Nobody has any items yet")
            return

        idx = self._choose([p.name for p in people], "Select person number: ")
        if idx is None:
            return
        person = people[idx]
        item_idx = self._choose([a.receipt_item.name for a in person.assignments], "Select item number: ")
        if item_idx is None:
            return
        assignment = person.assignments[item_idx]
        self.store.unassign_item(assignment.id, person.name)
        print(f"✓ Removed {assignment.receipt_item.name} from {person.name}")

    def display_summary(self):
        """Display everyone's share and the reconciliation"""
        receipt = self.store.receipt
        if receipt is None or not self.store.people:
            print("\n⚠ Need a receipt and people to show a summary")
            return

        print("\n" + "="*50)
        print("💰 BILL SUMMARY")
        print("="*50)

        for person in self.store.people:
            print(f"\n{person.name:30} {self._money(final_total(person, receipt)):>12}")
            for assignment in person.assignments:
                label = assignment.receipt_item.name
                if assignment.quantity > 1:
                    label += f" × {assignment.quantity}"
                if assignment.share_percentage < 1.0:
                    label += f" ({int(assignment.share_percentage * 100)}%)"
                print(f"  {label:28} {self._money(assignment.total_price):>12}")
            print(f"  {'Subtotal:':28} {self._money(person_subtotal(person)):>12}")
            print(f"  {'Tax:':28} {self._money(tax_share(person, receipt)):>12}")
            print(f"  {'Tip:':28} {self._money(tip_share(person, receipt)):>12}")

        result = reconcile(self.store.people, receipt)
        print("\n" + "-"*50)
        print(f"{'Calculated Total:':30} {self._money(result.calculated_total):>12}")
        print(f"{'Receipt Total:':30} {self._money(result.receipt_total):>12}")
        if result.is_match:
            print(f"✅ {MATCH_NOTE}")
        else:
            print(f"{'Difference:':30} {self._money(result.absolute_difference):>12}")
            print(f"⚠ {MISMATCH_NOTE}")

        unassigned = self.store.unassigned_items
        if unassigned:
            print(f"\nUnassigned: {', '.join(item.name for item in unassigned)}")

    def export_results(self) -> Optional[Path]:
        """Export receipt, roster, totals and transcript to JSON"""
        receipt = self.store.receipt
        if receipt is None:
            print("\n⚠ No receipt to export")
            return None

        if not ensure_directory_exists(EXPORT_DIR):
            return None
        filename = Path(EXPORT_DIR) / f"billchat_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"

        data = {
            'export_info': {
                'timestamp': datetime.now().isoformat(),
                'version': '1.0',
                'state': self.store.state.value,
            },
            'receipt': receipt.to_dict(),
            'people': [person.to_dict() for person in self.store.people],
            'summary': split_summary(self.store.people, receipt),
            'conversation': [message.to_dict() for message in self.store.conversation],
        }

        try:
            with open(filename, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error("Export to %s failed: %s", filename, e)
            print(f"\nExport failed: {e}")
            return None

        print(f"\n✅ Exported to {filename}")
        return filename

    def load_menu(self):
        print("\n1. Load receipt file (.json or .txt)")
        print("2. Type receipt lines")
        print("3. Use demo receipt")
        choice = validate_menu_choice(input("\nChoice: "), ['1', '2', '3']) or ''
        if choice == '1':
            self.load_receipt_file(input("Enter receipt path: ").strip())
        elif choice == '2':
            self.enter_receipt_text()
        elif choice == '3':
            self.load_demo_receipt()

    def run(self):
        """Run the CLI application"""
        self.display_banner()

        while True:
            print("\n" + "="*50)
            print(f"MAIN MENU [{self.store.state.value.replace('_', ' ')}]")
            print("="*50)
            print("1. Load receipt")
            print("2. Describe who got what")
            print("3. Assign an unassigned item")
            print("4. Remove an assignment")
            print("5. Show receipt")
            print("6. Show summary")
            print("7. Export results")
            print("8. Start new receipt")
            print("9. Exit")

            choice = validate_menu_choice(input("\nChoice: "), [str(i) for i in range(1, 10)]) or ''

            if choice == '1':
                self.load_menu()
            elif choice == '2':
                self.chat()
            elif choice == '3':
                self.assign_unassigned()
            elif choice == '4':
                self.remove_assignment()
            elif choice == '5':
                self.display_receipt()
            elif choice == '6':
                self.display_summary()
            elif choice == '7':
                self.export_results()
            elif choice == '8':
                self.store.reset()
                print("\n✓ Session cleared")
            elif choice == '9':
                print("\n👋 Thank you for using BillChat!")
                break
