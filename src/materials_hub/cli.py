# cli.py: operator CLI over the same backend the dashboard uses

import argparse
import getpass
import os
import sys

from .config import Settings
from .dashboard import Dashboard
from .errors import AuthError, ConfigurationError, FetchError
from .log import configure_logging
from .session import SessionContext, SessionGateway
from .store import MaterialStore


def build_parser():
    parser = argparse.ArgumentParser(prog="materials-hub", description="Manage project materials from the shell")
    parser.add_argument("--username", default=os.environ.get("MATERIALS_USERNAME"), help="Account username")
    parser.add_argument("--password", default=os.environ.get("MATERIALS_PASSWORD"), help="Account password (prompted if omitted)")
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("check-config", help="Report missing settings")
    sub.add_parser("list", help="List materials by category")
    sub.add_parser("layout", help="Show the column layout")

    add = sub.add_parser("add", help="Add a material")
    add.add_argument("--title", required=True)
    add.add_argument("--category", default="")
    add.add_argument("--link", required=True)

    edit = sub.add_parser("edit", help="Edit a material")
    edit.add_argument("--id", required=True)
    edit.add_argument("--title")
    edit.add_argument("--category")
    edit.add_argument("--link")

    dele = sub.add_parser("delete", help="Delete a material")
    dele.add_argument("--id", required=True)
    dele.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    move = sub.add_parser("move", help="Drop one material onto another within a category")
    move.add_argument("--id", required=True, help="Material being moved")
    move.add_argument("--onto", required=True, help="Material whose slot it takes")
    move.add_argument("--category", help="Category to reorder (defaults to the moved material's)")
    return parser


def open_dashboard(settings, args, http=None):
    auth = SessionContext(SessionGateway(settings, http), {})
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    auth.login(args.username, password)
    account_id = auth.verify()
    store = MaterialStore(settings, auth.access_token, http)
    return Dashboard(store, account_id, settings.max_columns)


def main(argv=None, settings=None, http=None, confirm=input):
    args = build_parser().parse_args(argv)
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if args.cmd is None:
        build_parser().print_help()
        return 0

    if args.cmd == "check-config":
        missing = settings.missing()
        if missing:
            print("Missing: " + ", ".join(missing), file=sys.stderr); return 1
        print("Configuration complete.")
        return 0

    try:
        dash = open_dashboard(settings, args, http)
    except (ConfigurationError, AuthError, FetchError) as e:
        print(e.user_message, file=sys.stderr); return 1

    if not dash.refresh():
        print(dash.status, file=sys.stderr); return 1

    if args.cmd == "list":
        for name, items in dash.groups():
            print(f"[{name}]")
            for m in items:
                order = "-" if m.sort_order is None else m.sort_order
                print(f"  {order}\t{m.id}\t{m.title}\t{m.link}")
        return 0

    if args.cmd == "layout":
        for i, column in enumerate(dash.layout(), start=1):
            print(f"col {i} ({column.count}): " + ", ".join(column.categories))
        return 0

    if args.cmd == "add":
        if not dash.save(args.title, args.category, args.link):
            print(dash.status, file=sys.stderr); return 1
        return 0

    if args.cmd == "edit":
        m = dash.find(args.id)
        if m is None:
            print("Material not found", file=sys.stderr); return 1
        ok = dash.save(args.title if args.title is not None else m.title,
                       args.category if args.category is not None else m.category,
                       args.link if args.link is not None else m.link,
                       material_id=m.id)
        if not ok:
            print(dash.status, file=sys.stderr); return 1
        return 0

    if args.cmd == "delete":
        m = dash.find(args.id)
        if m is None:
            print("Material not found", file=sys.stderr); return 1
        confirmed = args.yes or confirm(f'Delete "{m.title}"? This cannot be undone. [y/N] ').strip().lower() == "y"
        if not confirmed:
            print("Aborted."); return 1
        if not dash.delete(m.id, confirmed=True):
            print(dash.status, file=sys.stderr); return 1
        return 0

    if args.cmd == "move":
        m = dash.find(args.id)
        category = args.category or (m.category if m else "")
        updates = dash.drop(args.id, args.onto, category)
        print(f"renumbered={len(updates)}")
        if dash.status:
            print(dash.status, file=sys.stderr); return 1
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
