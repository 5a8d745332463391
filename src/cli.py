#!/usr/bin/env python3
"""
Command-line interface for the regex replace engine.
Find, replace, expand and split with regex patterns in files or stdin.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from regex_engine import CompileOptions, PatternCompileError, RegexEngineError, compile
from templates.template_expander import unresolved_references


logger = logging.getLogger("regex_replace")


def read_input(path: Optional[str]) -> bytes:
    """Read the subject from a file, or stdin when no file is given."""
    if not path or path == '-':
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def write_output(data: bytes, path: Optional[str]):
    if not path or path == '-':
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        Path(path).write_bytes(data)


def show(data: bytes) -> str:
    """Printable form of matched bytes."""
    return data.decode('utf-8', 'backslashreplace')


def compile_options(args) -> CompileOptions:
    return CompileOptions(
        ignore_case=args.ignore_case,
        multiline=args.multiline,
        dotall=args.dotall,
        verbose=args.verbose_pattern,
        timeout=args.timeout,
    )


def find_command(args):
    """Execute find operation."""
    subject = read_input(args.file)

    with compile(args.pattern, compile_options(args)) as regexp:
        records = regexp.find_all(subject, args.n)
        names = regexp.subexp_names()

    if args.json:
        results = []
        for record in records:
            groups = []
            for index, (start, end) in enumerate(record):
                groups.append({
                    'index': index,
                    'name': names[index] or None,
                    'start': start,
                    'end': end,
                    'text': show(subject[start:end]) if start >= 0 else None,
                })
            results.append({'start': record.start, 'end': record.end, 'groups': groups})
        print(json.dumps({'pattern': args.pattern, 'matches': results}, indent=2, ensure_ascii=False))
        return 0 if records else 1

    for record in records:
        print(f"→ Match: '{show(subject[record.start:record.end])}' (pos {record.start}-{record.end})")
        for index in range(1, len(record)):
            start, end = record.span(index)
            label = names[index] or str(index)
            if start < 0:
                print(f"    {label}: (unmatched)")
            else:
                print(f"    {label}: '{show(subject[start:end])}' (pos {start}-{end})")

    print(f"\nTotal matches found: {len(records)}")
    return 0 if records else 1


def replace_command(args):
    """Execute replace operation."""
    subject = read_input(args.file)
    replacement = args.replacement.encode('utf-8', 'surrogateescape')

    with compile(args.pattern, compile_options(args)) as regexp:
        count = len(regexp.find_all(subject, args.n))
        if args.literal:
            new_text = regexp.replace_all_literal(subject, replacement, args.n)
        else:
            new_text = regexp.replace_all(subject, replacement, args.n)

    write_output(new_text, args.output)
    logger.info("%d replacements made", count)

    if args.json:
        print(json.dumps({
            'pattern': args.pattern,
            'replacement': args.replacement,
            'literal': args.literal,
            'count': count,
            'output': args.output or '-',
        }), file=sys.stderr)
    return 0


def expand_command(args):
    """Print the expanded template for every match."""
    subject = read_input(args.file)
    template = args.template.encode('utf-8', 'surrogateescape')

    with compile(args.pattern, compile_options(args)) as regexp:
        for record in regexp.find_all(subject, args.n):
            print(show(regexp.expand(b"", template, subject, record)))
    return 0


def split_command(args):
    """Print the pieces between matches, one per line."""
    subject = read_input(args.file)

    with compile(args.pattern, compile_options(args)) as regexp:
        pieces = regexp.split(subject, args.n)

    if args.json:
        print(json.dumps([show(p) for p in pieces], ensure_ascii=False))
    else:
        for piece in pieces:
            print(show(piece))
    return 0


def validate_command(args):
    """Validate a pattern and, optionally, a replacement template against it."""
    options = compile_options(args)
    try:
        regexp = compile(args.pattern, options)
    except PatternCompileError as e:
        if args.json:
            print(json.dumps({'valid': False, 'error': str(e)}, ensure_ascii=False))
        else:
            print(f"Invalid regex pattern: {e}")
        return 1

    with regexp:
        capture_count = regexp.num_subexp()
        names = regexp.subexp_names()

    unresolved = []
    if args.template is not None:
        unresolved = [str(ref) for ref in unresolved_references(args.template, capture_count, names)]

    if args.json:
        print(json.dumps({
            'valid': True,
            'capture_count': capture_count,
            'names': names,
            'unresolved': unresolved,
            'options': options.to_dict(),
        }, ensure_ascii=False))
    else:
        print(f"Pattern: {args.pattern}")
        print(f"Capture groups: {capture_count}")
        for index, name in enumerate(names[1:], start=1):
            print(f"  {index}: {name or '(unnamed)'}")
        if args.template is not None:
            if unresolved:
                print(f"✗ Template references nothing for: {', '.join(unresolved)}")
            else:
                print("✓ Template references resolve")

    return 1 if unresolved else 0


def add_pattern_arguments(parser):
    parser.add_argument('-i', '--ignore-case', action='store_true', help='Case insensitive matching')
    parser.add_argument('-m', '--multiline', action='store_true', help='^ and $ match at line breaks')
    parser.add_argument('-s', '--dotall', action='store_true', help='. matches newlines too')
    parser.add_argument('-x', '--verbose-pattern', action='store_true',
                        help='Ignore whitespace and comments in the pattern')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')
    parser.add_argument('--timeout', type=float, default=None,
                        help='Give up on a single match attempt after this many seconds')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Regex Replace - find & replace with regex patterns and $-templates'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Find command
    find_parser = subparsers.add_parser('find', help='List matches of a pattern')
    find_parser.add_argument('pattern', help='Regex pattern to find')
    find_parser.add_argument('file', nargs='?', help='Input file (default: stdin)')
    find_parser.add_argument('-n', type=int, default=-1, help='Maximum matches (-1 = unlimited)')
    find_parser.add_argument('--json', action='store_true', help='Output as JSON')
    add_pattern_arguments(find_parser)
    find_parser.set_defaults(func=find_command)

    # Replace command
    replace_parser = subparsers.add_parser('replace', help='Replace matches of a pattern')
    replace_parser.add_argument('pattern', help='Regex pattern to find')
    replace_parser.add_argument('replacement', help='Replacement template ($1, ${name}, $$)')
    replace_parser.add_argument('file', nargs='?', help='Input file (default: stdin)')
    replace_parser.add_argument('--output', '-o', help='Output file (default: stdout)')
    replace_parser.add_argument('--literal', action='store_true',
                                help='Use the replacement verbatim, without $-references')
    replace_parser.add_argument('-n', type=int, default=-1, help='Maximum replacements (-1 = unlimited)')
    replace_parser.add_argument('--json', action='store_true', help='Print a JSON summary to stderr')
    add_pattern_arguments(replace_parser)
    replace_parser.set_defaults(func=replace_command)

    # Expand command
    expand_parser = subparsers.add_parser('expand', help='Print a template expanded for each match')
    expand_parser.add_argument('pattern', help='Regex pattern to find')
    expand_parser.add_argument('template', help='Template ($1, ${name}, $$)')
    expand_parser.add_argument('file', nargs='?', help='Input file (default: stdin)')
    expand_parser.add_argument('-n', type=int, default=-1, help='Maximum matches (-1 = unlimited)')
    add_pattern_arguments(expand_parser)
    expand_parser.set_defaults(func=expand_command)

    # Split command
    split_parser = subparsers.add_parser('split', help='Split input around matches')
    split_parser.add_argument('pattern', help='Separator pattern')
    split_parser.add_argument('file', nargs='?', help='Input file (default: stdin)')
    split_parser.add_argument('-n', type=int, default=-1, help='Maximum pieces (-1 = unlimited)')
    split_parser.add_argument('--json', action='store_true', help='Output as JSON')
    add_pattern_arguments(split_parser)
    split_parser.set_defaults(func=split_command)

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Check a pattern and a replacement template')
    validate_parser.add_argument('pattern', help='Regex pattern')
    validate_parser.add_argument('--template', help='Replacement template to check against the pattern')
    validate_parser.add_argument('--json', action='store_true', help='Output as JSON')
    add_pattern_arguments(validate_parser)
    validate_parser.set_defaults(func=validate_command)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except RegexEngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
