"""
Entry point for the WXR → book import tool.

Usage::

    python main.py plan docs/book-export.xml
    python main.py commit --skip 42 --type 17=front-matter
"""

import argparse
import sys

from wxr_importer.import_tool import WxrImportTool
from wxr_importer.importers import ImportSelection

CONFIG_FILE = "config/import_config.json"


def parse_type_overrides(values):
    """Turn ``["17=front-matter", ...]`` into ``{"17": "front-matter"}``."""
    overrides = {}
    for value in values or []:
        record_id, sep, post_type = value.partition("=")
        if not sep or not record_id.strip() or not post_type.strip():
            raise argparse.ArgumentTypeError(f"Expected ID=TYPE, got {value!r}")
        overrides[record_id.strip()] = post_type.strip()
    return overrides


def build_parser():
    parser = argparse.ArgumentParser(description="Import a WordPress WXR export into a book.")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Parse an export and save the list of importable records")
    plan.add_argument("xml_file", help="Path to the WXR (.xml) export")
    plan.add_argument("--mime", default="application/xml", help="MIME type of the uploaded file")

    commit = sub.add_parser("commit", help="Import the records saved by 'plan'")
    commit.add_argument("--skip", action="append", default=[], metavar="ID", help="Record id to leave out (repeatable)")
    commit.add_argument("--type", action="append", default=[], metavar="ID=TYPE", help="Import a record as another post type (repeatable)")
    commit.add_argument("--dry-run", action="store_true", help="Do not download images")
    return parser


def main(argv=None):
    """
    Main function to run the WXR import tool.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    tool = WxrImportTool(config_file=args.config)

    if args.command == "plan":
        ok = tool.plan_import(args.xml_file, mime=args.mime)
    else:
        try:
            selection = ImportSelection(skip_ids=args.skip, type_overrides=parse_type_overrides(args.type))
        except (argparse.ArgumentTypeError, ValueError) as e:
            parser.error(str(e))
        if args.dry_run:
            tool.config["import"]["dry_run"] = True
        ok = tool.run_import(selection)

    for notice in tool.notices:
        print(notice)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
