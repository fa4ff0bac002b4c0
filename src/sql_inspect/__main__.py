"""CLI entry-point for sql_inspect.

Usage:
    python -m sql_inspect check <file|-> [--sql-type DDL|DML|EXPORT] [--params FILE] [--json]
    python -m sql_inspect check <file|-> --host H [--port P] [--user U] [--password PW] [--schema S]
    python -m sql_inspect sql-type <file|-> --type DDL|DML|EXPORT
    python -m sql_inspect split <file|->
    python -m sql_inspect statement <file|->
    python -m sql_inspect alter-table <file|->
    python -m sql_inspect params
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml

from sql_inspect import __version__
from sql_inspect.api import inspect_sql, validate_results
from sql_inspect.core.config import InspectParams, default_inspect_params
from sql_inspect.dao.db import DB
from sql_inspect.parser import ParseError, SQLTypeError, UnsupportedStatementError
from sql_inspect.parser.classify import (
    check_sql_type,
    get_sql_statement,
    get_table_name_from_alter_statement,
    split_sql_text,
)
from sql_inspect.utils.exit_codes import ExitCode
from sql_inspect.utils.json_norm import stable_json_dumps


def _read_sql(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_params(path: str | None) -> InspectParams:
    if path:
        params = InspectParams.load(path)
    else:
        params = InspectParams.discover(Path.cwd())
    return params.normalize()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sql-inspect",
        description="Review MySQL/TiDB change requests against database standards.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-v", "--verbose", action="store_true", help="Log engine diagnostics to stderr.")
    sub = p.add_subparsers(dest="command")

    check_p = sub.add_parser("check", help="Review SQL and print one result per statement.")
    check_p.add_argument("source", help="SQL file, or '-' for stdin.")
    check_p.add_argument("--sql-type", default="", choices=["", "DDL", "DML", "EXPORT"], help="Ticket type gate.")
    check_p.add_argument("--db-type", default="MySQL", help="Dialect label (default: MySQL).")
    check_p.add_argument("--params", default=None, help="YAML file of review parameters.")
    check_p.add_argument("--host", default="", help="Instance under review; offline when omitted.")
    check_p.add_argument("--port", type=int, default=3306)
    check_p.add_argument("--user", default="")
    check_p.add_argument("--password", default="")
    check_p.add_argument("--schema", default="")
    check_p.add_argument("--timeout", type=float, default=None, help="Seconds allowed for database lookups.")
    check_p.add_argument("--json", action="store_true", help="Emit JSON instead of text.")

    type_p = sub.add_parser("sql-type", help="Check that every statement matches a ticket type.")
    type_p.add_argument("source")
    type_p.add_argument("--type", dest="wanted", required=True, choices=["DDL", "DML", "EXPORT"])

    split_p = sub.add_parser("split", help="Print each statement of a batch as JSON.")
    split_p.add_argument("source")

    stmt_p = sub.add_parser("statement", help="Print the routing tag of a single statement.")
    stmt_p.add_argument("source")

    alter_p = sub.add_parser("alter-table", help="Print the table an ALTER TABLE statement targets.")
    alter_p.add_argument("source")

    sub.add_parser("params", help="Print the default review parameters as YAML.")
    return p


# ── handlers ─────────────────────────────────────────────────────────


def _handle_check(args: argparse.Namespace) -> int:
    params = _load_params(args.params)
    db = None
    if args.host:
        db = DB(host=args.host, port=args.port, user=args.user, password=args.password, database=args.schema)
    resp = inspect_sql(
        _read_sql(args.source),
        sql_type=args.sql_type,
        db_type=args.db_type,
        params=params,
        db=db,
        timeout=args.timeout,
    )
    exit_code = ExitCode.for_review(resp.code, resp.status, bool(resp.results))
    if resp.code != 0:
        print(f"error: {resp.message}", file=sys.stderr)
        return exit_code

    validate_results(resp.results)
    if args.json:
        sys.stdout.write(stable_json_dumps(resp.to_dict()))
    else:
        for r in resp.results:
            print(f"[{r.level}] {r.type or '-'}: {r.query}")
            for message in r.messages:
                print(f"    {message}")
    return exit_code


def _handle_sql_type(args: argparse.Namespace) -> int:
    try:
        check_sql_type(_read_sql(args.source), args.wanted)
    except SQLTypeError as exc:
        print(f"FAIL: {exc}", file=sys.stderr)
        return ExitCode.VIOLATION
    print("OK")
    return ExitCode.SUCCESS


def _handle_split(args: argparse.Namespace) -> int:
    sys.stdout.write(stable_json_dumps(split_sql_text(_read_sql(args.source))))
    return ExitCode.SUCCESS


def _handle_statement(args: argparse.Namespace) -> int:
    print(get_sql_statement(_read_sql(args.source)))
    return ExitCode.SUCCESS


def _handle_alter_table(args: argparse.Namespace) -> int:
    print(get_table_name_from_alter_statement(_read_sql(args.source)))
    return ExitCode.SUCCESS


def _handle_params(args: argparse.Namespace) -> int:
    sys.stdout.write(yaml.safe_dump(default_inspect_params().to_dict(), allow_unicode=True, sort_keys=False))
    return ExitCode.SUCCESS


_HANDLERS = {
    "check": _handle_check,
    "sql-type": _handle_sql_type,
    "split": _handle_split,
    "statement": _handle_statement,
    "alter-table": _handle_alter_table,
    "params": _handle_params,
}


def main(argv: list[str] | None = None) -> int:
    """Entry-point; returns an exit code (0 = pass, 1 = violations, 2 = error)."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return ExitCode.ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return _HANDLERS[args.command](args)
    except (ParseError, UnsupportedStatementError, OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
