# main.py

import argparse
import sys

import config
from monitor import send_alert, start_monitoring
from verifier import ManifestVerifier, VerifyResult
from walker import DirectoryWalker, ExclusionFilter


def build_parser():
    parser = argparse.ArgumentParser(
        prog="mangen",
        description="Generate manifest of directory files with hashes.",
    )
    parser.add_argument("dir_path", nargs="?", default=config.DEFAULT_ROOT, metavar="DIR_PATH",
                        help="Directory to scan (default: current directory).")
    parser.add_argument("-v", "--version", action="version", version=f"commit: {config.GIT_COMMIT_HASH}",
                        help="Show git commit hash and exit.")
    parser.add_argument("-e", dest="exclude_name", metavar="NAME",
                        help="Exclude files or directories with the specified NAME.")
    parser.add_argument("-E", dest="exclude_pattern", metavar="PATTERN",
                        help="Exclude files or directories matching the PATTERN (supports '*' and '.').")
    parser.add_argument("--sort", action="store_true",
                        help="Visit directory entries in name order instead of listing order.")
    parser.add_argument("--webhook", metavar="URL", default=config.WEBHOOK_URL,
                        help="Send an alert to this webhook when verification fails or a watched tree changes.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--verify", metavar="FILE", help="Verify manifest file integrity.")
    mode.add_argument("--watch", action="store_true",
                      help="Keep watching DIR_PATH and report every manifest checksum change.")
    return parser


def run_verify(manifest_path, webhook_url=None):
    verifier = ManifestVerifier()
    result = verifier.verify(manifest_path)
    if result is not VerifyResult.INVALID:
        print(result)

    if result is VerifyResult.VALID:
        return 0

    if webhook_url:
        stored = f"{verifier.stored:08X}" if verifier.stored is not None else "missing"
        computed = f"{verifier.computed:08X}" if verifier.computed is not None else "unknown"
        send_alert(manifest_path, stored, computed, webhook_url)
    return 1


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.verify is not None:
        return run_verify(args.verify, args.webhook)

    exclusion = ExclusionFilter(args.exclude_name, args.exclude_pattern)

    if args.watch:
        start_monitoring(args.dir_path, exclusion, args.sort, args.webhook)
        return 0

    sys.stdout.flush()
    DirectoryWalker(exclusion, out=sys.stdout.buffer, sort_entries=args.sort).generate(args.dir_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
