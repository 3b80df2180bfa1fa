"""
Dataverse dataset JSON -> DCAT-AP (RDF/XML, Turtle or JSON-LD).

USAGE
------

From a file exported by Dataverse (``/api/datasets/:persistentId/?persistentId=...``
returns the same shape under ``data``):

    dcatap-export \\
        --dataset-json /tmp/dataset.json \\
        --format TURTLE \\
        --datafile-base-url "https://rdr.kuleuven.be" \\
        --output /tmp/dataset.dcatap.ttl

From STDIN:

    curl -s "$DATAVERSE/api/datasets/export?exporter=dataverse_json&persistentId=$PID" \\
        | dcatap-export --quiet > dataset.rdf

Notes
-----
- Encoding of the input file is detected via chardet; override with --encoding.
- Defaults for --format and --datafile-base-url can be set with the
  DCATAP_OUTPUT_LANG and DCATAP_DATAFILE_BASE_URL environment variables.
- Output goes to stdout unless --output names a file.
"""

from __future__ import annotations

import argparse
import io
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import chardet

from .exporter import OUTPUT_FORMATS, DCATAPExporter, DictDataProvider, ExportError
from .mapper import DEFAULT_DATAFILE_BASE_URL


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Set up logging configuration."""
    if quiet:
        level = logging.WARNING
    else:
        level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def detect_encoding(path: Path, sample_bytes: int = 1024 * 1024) -> str:
    """Detect file encoding using chardet."""
    logging.info(f"Detecting encoding for {path}")
    try:
        with path.open("rb") as f:
            raw = f.read(sample_bytes)
        res = chardet.detect(raw)
        encoding = (res.get("encoding") or "utf-8").lower()
        confidence = res.get("confidence", 0)
        logging.info(f"Detected encoding: {encoding} (confidence: {confidence:.2f})")
        # JSON is UTF-8 by definition; ascii is a subset
        if encoding == "ascii":
            return "utf-8"
        return encoding
    except Exception as e:
        logging.warning(f"Error detecting encoding: {e}. Using UTF-8 as fallback.")
        return "utf-8"


def unwrap_api_response(payload: Any) -> Dict[str, Any]:
    """Accept either the bare dataset JSON or a native API ``{"status", "data"}`` envelope."""
    if not isinstance(payload, dict):
        raise ValueError("Dataset JSON must be an object")
    data = payload.get("data")
    if "status" in payload and isinstance(data, dict):
        # The native API calls the version "latestVersion"
        if "datasetVersion" not in data and isinstance(data.get("latestVersion"), dict):
            data = dict(data, datasetVersion=data["latestVersion"])
        return data
    return payload


def load_dataset_json(path: Path, encoding: Optional[str] = None) -> Dict[str, Any]:
    """Load dataset JSON from a file."""
    if not path.exists():
        raise FileNotFoundError(f"Dataset JSON file not found: {path}")
    enc = encoding or detect_encoding(path)
    try:
        payload = json.loads(path.read_text(encoding=enc))
    except UnicodeDecodeError as e:
        raise ValueError(f"Error decoding file with encoding '{enc}': {e}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid dataset JSON in {path}: {e}")
    return unwrap_api_response(payload)


def read_dataset_json_from_stdin() -> Optional[Dict[str, Any]]:
    """Attempt to load dataset JSON from STDIN."""
    stream = sys.stdin
    if stream is None or stream.closed:
        return None
    try:
        if stream.isatty():
            return None
    except Exception:
        return None
    raw = stream.read()
    if not raw or not raw.strip():
        return None
    try:
        return unwrap_api_response(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid dataset JSON on stdin: {exc}")


def write_output(payload: bytes, target: Path) -> None:
    if str(target) == "-":
        sys.stdout.buffer.write(payload)
        if not payload.endswith(b"\n"):
            sys.stdout.buffer.write(b"\n")
        sys.stdout.flush()
        return
    target_parent = target.parent
    if target_parent != Path("."):
        target_parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(payload)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Convert Dataverse dataset JSON to DCAT-AP RDF.")
    p.add_argument("--dataset-json", type=Path, help="Path to Dataverse dataset JSON (otherwise read from STDIN)")
    p.add_argument("--output", "-o", type=Path, default=Path("-"), help="Output path ('-' for stdout)")
    p.add_argument(
        "--format",
        dest="output_lang",
        default=os.environ.get("DCATAP_OUTPUT_LANG") or "RDF/XML",
        help="Output serialization: " + ", ".join(OUTPUT_FORMATS) + " (default: RDF/XML)",
    )
    p.add_argument(
        "--datafile-base-url",
        default=os.environ.get("DCATAP_DATAFILE_BASE_URL") or DEFAULT_DATAFILE_BASE_URL,
        help="Base URL of the Dataverse installation, used for file distribution URIs",
    )
    p.add_argument("--encoding", help="Force input encoding (otherwise detected)")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--quiet", action="store_true", help="Suppress console summary output")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        exporter = DCATAPExporter(
            output_lang=args.output_lang,
            datafile_base_url=args.datafile_base_url,
        )
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    try:
        if args.dataset_json:
            dataset_json = load_dataset_json(args.dataset_json, args.encoding)
        else:
            dataset_json = read_dataset_json_from_stdin()
            if dataset_json is None:
                print("[ERROR] Provide --dataset-json or pipe dataset JSON on STDIN", file=sys.stderr)
                return 2

        logging.info("Input: %s", args.dataset_json or "<stdin>")
        logging.info("Output: %s (%s)", args.output, exporter.output_format.name)

        buffer = io.BytesIO()
        exporter.export_dataset(DictDataProvider(dataset_json), buffer)
        write_output(buffer.getvalue(), args.output)

        if not args.quiet and str(args.output) != "-":
            print(f"[OK] Wrote DCAT-AP {exporter.output_format.name}: {args.output}")
        logging.info("Conversion completed successfully")
        return 0

    except (ExportError, ValueError, OSError) as e:
        logging.error("Error during conversion: %s", e)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
