from __future__ import annotations
import argparse, json, logging, os, sys
from pathlib import Path

from .common import setup_logging
from lrzmagic import ExitCode, FormatError, HeaderIOError, PatchRequest
from lrzmagic import format_info, read_archive_header, set_size, to_dict

USAGE = """\
Usage: ps2lrz -s size [-f] filename
       ps2lrz -i filename
       ps2lrz filename
       ps2lrz [-h | -?]
  -s   size in bytes.
  -f   force overwrite of file size. CAUTION!!
  -i   show file info and exit.
  -h|? show this message"""


class _OptionError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    def error(self, message):  # argparse would sys.exit(2)
        raise _OptionError(message)


def parse_args(argv=None):
    p = _Parser(prog="ps2lrz", add_help=False,
                description="Poke the uncompressed size into an lrzip magic header / show header info")
    p.add_argument("-s", dest="size", default=None, help="Taille non compressée (octets) à écrire")
    p.add_argument("-f", dest="force", action="store_true", help="Écraser une taille déjà présente")
    p.add_argument("-i", dest="info", action="store_true", help="Afficher l'en-tête et sortir")
    p.add_argument("-h", "-?", dest="help", action="store_true")
    p.add_argument("--json", action="store_true", help="Info en JSON")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    p.add_argument("filename", nargs="?")
    return p.parse_args(argv)


def _usage() -> None:
    print(USAGE, file=sys.stdout)


def _parse_size(s: str) -> int | None:
    # decimal digits only: no sign, blanks or "_" separators
    if not (s.isascii() and s.isdigit()):
        return None
    n = int(s, 10)
    try:
        return PatchRequest(n).new_size
    except ValueError:
        return None


def _show_info(path: Path, as_json: bool) -> int:
    view = read_archive_header(path)
    try:
        archive_size = os.stat(path).st_size
    except OSError:
        archive_size = None
    if as_json:
        d = to_dict(view)
        d["path"] = str(path)
        d["archive_size"] = archive_size
        print(json.dumps(d, ensure_ascii=False, indent=2))
    else:
        print(format_info(view, str(path), archive_size))
    return ExitCode.OK


def _poke(path: Path, req: PatchRequest) -> int:
    res = set_size(path, req)
    print(f"New file size is {res.new_size}. Magic file size set to: {res.hex}")
    return ExitCode.OK


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        _usage()
        return ExitCode.USAGE
    try:
        args = parse_args(argv)
    except _OptionError as e:
        print(f"ps2lrz: {e}", file=sys.stderr)
        _usage()
        return ExitCode.BAD_OPTION
    if args.help:
        _usage()
        return ExitCode.USAGE

    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    if args.info and (args.size is not None or args.force):
        logging.error("Info option cannot be used with other options. Exiting...")
        return ExitCode.INFO_CONFLICT
    size = None
    if args.size is not None:
        size = _parse_size(args.size)
        if size is None:
            logging.error("Invalid filesize %r. Exiting...", args.size)
            return ExitCode.INVALID_SIZE
    elif args.force:
        logging.error("-f requires -s. Exiting...")
        return ExitCode.BAD_OPTION
    if not args.filename:
        logging.error("No filename given. Exiting...")
        _usage()
        return ExitCode.MISSING_FILENAME

    path = Path(args.filename)
    try:
        if size is None:
            logging.debug("Showing file info only: %s", path)
            return _show_info(path, args.json)
        return _poke(path, PatchRequest(size, force=args.force))
    except FormatError as e:
        logging.error("%s: %s. Exiting...", path, e)
        return e.exit_code
    except HeaderIOError as e:
        logging.error("%s. Exiting...", e)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
