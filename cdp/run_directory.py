from __future__ import annotations

import argparse
import logging

from cdp.config import load_directory_config
from cdp.contacts import ContactStore
from cdp.dataset import load_directory
from cdp.errors import DirectoryError
from cdp.query import CONTACT_FILTERS, contact_message, filter_records, find_record
from cdp.sheets.source import source_from_config


def _format_line(record, contacted: bool) -> str:
    mark = "[x]" if contacted else "[ ]"
    parts = [record.company_name]
    if record.market:
        parts.append(f"({record.market})")
    if record.observed_on:
        parts.append(f"observed_on={record.observed_on}")
    for value in (record.contact_email, record.contact_phone, record.contact_url):
        if value:
            parts.append(value)
    return f"{mark} {record.identifier}  " + " ".join(parts)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show the campaign directory from the configured sheet.")
    parser.add_argument("--demo", action="store_true", help="Use the bundled fixture instead of the spreadsheet.")
    parser.add_argument("--campaign", default="", help="Campaign name (default: DIRECTORY_CAMPAIGN_NAME).")
    parser.add_argument("--market", default="", help="Only show this market (default: all).")
    parser.add_argument("--contacted", choices=CONTACT_FILTERS, default="any", help="Filter by contact status.")
    parser.add_argument("--mark", metavar="ID", action="append", default=[], help="Mark a record as contacted.")
    parser.add_argument("--unmark", metavar="ID", action="append", default=[], help="Clear a record's contacted mark.")
    parser.add_argument("--template", metavar="ID", help="Print the campaign contact message for one record.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = {"data_source": "fixture"} if args.demo else {}
        if args.campaign:
            overrides["campaign_name"] = args.campaign
        cfg = load_directory_config(**overrides)
        directory = load_directory(cfg, source_from_config(cfg))
        store = ContactStore(cfg.contacts_path)

        for identifier in args.mark:
            store.mark_contacted(identifier)
        for identifier in args.unmark:
            store.unmark_contacted(identifier)

        if args.template:
            record = find_record(directory, args.template)
            if record is None:
                raise DirectoryError(f'Record "{args.template}" not found')
            print(contact_message(directory, record))
            return 0

        view = filter_records(directory, market=args.market, contact_status=args.contacted, store=store)

        print(f"campaign={directory.campaign.name}")
        print(f"markets={','.join(directory.markets)}")
        if not view:
            print("no matches")
        for record in view:
            print(_format_line(record, store.is_contacted(record.identifier)))

        campaign_total = len([r for r in directory.records if r.campaign == directory.campaign.name])
        print(f"shown={len(view)} total={campaign_total}")
        return 0

    except DirectoryError as e:
        print(f"ERROR err={e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
