from __future__ import annotations
import argparse, json, logging, os, sys
from isipython import config as CFG
from isipython.engine import Engine
from isipython.loader import load_source, read_text
from isipython.models import Position

log = logging.getLogger("isipython.cli")


def _read(path: str, *, as_surface: bool) -> str:
    if path == "-":
        return sys.stdin.read()
    return load_source(path) if as_surface else read_text(path)


def _parse_position(s: str) -> Position:
    try:
        line, col = s.split(":", 1)
        return Position(int(line), int(col))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LINE:COL, got {s!r}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="isipython", description="isiPython bridge CLI (Engine-backed)")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--forward", action="store_true", help="Translate isiPython -> Python")
    g.add_argument("--reverse", action="store_true", help="Translate Python -> isiPython")
    g.add_argument("--auto", action="store_true", help="Detect the language and translate")
    g.add_argument("--validate", action="store_true", help="Print diagnostics (exit 1 on errors)")
    g.add_argument("--tokens", action="store_true", help="Dump display tokens")
    g.add_argument("--complete", type=_parse_position, metavar="LINE:COL", help="Completions at a position")
    g.add_argument("--keywords", action="store_true", help="List the keyword table")
    g.add_argument("--serve", action="store_true", help="Run the Flask API + editor page")

    p.add_argument("path", nargs="?", default="-", help="Source file ('-' for stdin)")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--host", default=CFG.HOST)
    p.add_argument("--port", type=int, default=CFG.PORT)
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    if args.verbose or CFG.VERBOSE:
        logging.basicConfig(level=logging.INFO)
        os.environ["ISIPYTHON_VERBOSE"] = "1"

    if args.serve:
        from .web import serve
        serve(args.host, args.port, verbose=args.verbose)
        return 0

    eng = Engine()

    if args.keywords:
        rows = eng.keywords()
        if args.json:
            print(json.dumps(rows, ensure_ascii=False, indent=2))
        else:
            for r in rows:
                print(f"{r['isipython']:<18} {r['python']:<10} {r['meaning']}")
        return 0

    try:
        text = _read(args.path, as_surface=not (args.reverse or args.auto))
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.forward or args.reverse or args.auto:
        if args.auto:
            res = eng.auto_translate(text)
            log.info("auto: %s -> %s", res.source_language.value, res.target_language.value)
            out, payload = res.translated_code, res.to_dict()
        else:
            out = eng.translate_forward(text) if args.forward else eng.translate_reverse(text)
            payload = {"translatedCode": out}
        if args.json:
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            sys.stdout.write(out if out.endswith("\n") or not out else out + "\n")
        return 0

    if args.validate:
        diags = eng.validate(text)
        if args.json:
            print(json.dumps([d.to_dict() for d in diags], ensure_ascii=False, indent=2))
        elif not diags:
            print("(no problems)")
        else:
            name = "<stdin>" if args.path == "-" else args.path
            for d in diags:
                print(f"{name}:{d.line}:{d.column}: {d.severity.value} [{d.code}] {d.message}")
        return 1 if any(d.severity.value == "error" for d in diags) else 0

    if args.tokens:
        toks = eng.tokenize(text)
        if args.json:
            print(json.dumps([t.to_dict() for t in toks], ensure_ascii=False, indent=2))
        else:
            for t in toks:
                if t.kind.value != "white":
                    print(f"{t.line}:{t.column:<4} {t.kind.value:<18} {t.value!r}")
        return 0

    # --complete
    rows = eng.complete(text, args.complete)
    if args.json:
        print(json.dumps([s.to_dict() for s in rows], ensure_ascii=False, indent=2))
    elif not rows:
        print("(no suggestions)")
    else:
        print("#   Prio  Kind      Label                Detail")
        for i, s in enumerate(rows, 1):
            print(f"{i:<3} {s.priority:<5} {s.kind.value:<9} {s.label:<20} {s.detail}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
