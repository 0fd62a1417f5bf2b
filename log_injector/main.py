import argparse
import sys

from .pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-injector",
        description=(
            "Copy a Maven project and add structured logstash logging to the "
            "public methods of its *ServiceImpl classes."
        ),
    )
    parser.add_argument("original", help="original project directory (must contain pom.xml)")
    parser.add_argument("target", help="destination for the runnable instrumented copy (replaced)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run_pipeline(args.original, args.target)
    except (OSError, ValueError, RuntimeError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
