"""
Chess Notation Recovery → PGN
=============================
Reads chess notation from pasted text, a CSV of White/Black columns, or a
photograph of a scoresheet; replays every move with python-chess, repairs
common misreadings, and writes the longest valid game as a PGN file.

Usage:
    notation-recovery --text "1. e4 e5 2. Nf3 Nc6"
    notation-recovery --csv moves.csv --output game.pgn
    notation-recovery --image scoresheet.jpg --white "Magnus" --black "Hikaru"
"""

import argparse
import logging
import sys
from pathlib import Path

from . import config, services


# ── Report ───────────────────────────────────────────────────────────────────

def print_report(outcome) -> None:
    """Print a human-readable validation report to stdout."""
    corrected = 0
    for move in outcome.moves:
        color = move.side.value
        number = move.ply_index // 2 + 1
        if move.corrected:
            corrected += 1
            print(f"  ~ {number}. {color}: {move.san}  ← read as {move.original_token}")
        else:
            print(f"  ✓ {number}. {color}: {move.san}")

    failure = getattr(outcome, "failure", None)
    if failure is not None:
        print(f"  ✗ {failure.describe()}")

    print(f"\n── Summary ──")
    print(f"  Status:            {outcome.status}")
    print(f"  Moves recovered:   {outcome.moves_found}")
    print(f"  Plies accepted:    {len(outcome.moves)}")
    print(f"  Corrected:         {corrected}")
    if outcome.warning:
        print(f"  Warning:           {outcome.warning}")
    if outcome.status == "rejected":
        print(f"  Reason:            {outcome.reason}")


# ── CLI Entry Point ──────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(
        description="Chess notation recovery → PGN",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  notation-recovery --text "1. e4 e5 2. Nf3 Nc6"
  notation-recovery --csv moves.csv --output game.pgn
  notation-recovery --image scoresheet.jpg --white "Magnus" --black "Hikaru"
        """,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", "-i", help="Path to a chess scoresheet image")
    source.add_argument("--text", "-t", help="Notation text, or @path to read it from a file")
    source.add_argument("--csv", "-c", help="Path to a CSV file with White/Black columns")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output PGN file path (default: output/<input_stem>.pgn)",
    )
    parser.add_argument("--white", "-w", default="?", help="White player name")
    parser.add_argument("--black", "-b", default="?", help="Black player name")
    parser.add_argument("--event", "-e", default="Chess Notation Recovery", help="Event name")
    parser.add_argument("--no-vision", action="store_true", help="Never call the remote vision fallback")

    args = parser.parse_args()
    logging.basicConfig(level=config.LOG_LEVEL, format="[%(levelname)s] %(name)s: %(message)s")

    # ── Run Pipeline ──
    print("=" * 60)
    print("  Chess Notation Recovery → PGN")
    print("=" * 60)

    if args.image:
        image_path = Path(args.image)
        if not image_path.exists():
            print(f"[ERROR] Image not found: {image_path}")
            sys.exit(1)
        stem = image_path.stem
        print("\n[1/2] Recognizing and validating moves from image...")
        outcome = services.parse_image(str(image_path), use_vision=not args.no_vision)
    elif args.csv:
        csv_path = Path(args.csv)
        if not csv_path.exists():
            print(f"[ERROR] CSV not found: {csv_path}")
            sys.exit(1)
        stem = csv_path.stem
        print("\n[1/2] Validating moves from CSV rows...")
        outcome = services.parse_csv(csv_path.read_text(encoding="utf-8"))
    else:
        text = args.text
        stem = "notation"
        if text.startswith("@"):
            text_path = Path(text[1:])
            if not text_path.exists():
                print(f"[ERROR] File not found: {text_path}")
                sys.exit(1)
            text = text_path.read_text(encoding="utf-8")
            stem = text_path.stem
        print("\n[1/2] Validating moves from text...")
        outcome = services.parse_text(text)

    print_report(outcome)

    if outcome.status == "rejected":
        sys.exit(2)

    # Step 2: Build PGN
    output_path = args.output or str(config.OUTPUT_DIR / f"{stem}.pgn")
    print(f"\n[2/2] Building PGN...")
    pgn = services.build_pgn(
        outcome, output_path,
        white=args.white, black=args.black, event=args.event,
    )

    print(f"\n[✓] PGN saved to: {output_path}")
    print("-" * 60)
    print(pgn)
    print("-" * 60)


if __name__ == "__main__":
    main()
