"""Record a multi-threaded workload and write a chrome://tracing compatible file."""
from __future__ import annotations

import argparse
import logging
import pathlib
import sys
import time
from concurrent.futures import ThreadPoolExecutor

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scopetrace import Recorder, TraceConfig, profile_function, profile_scope, read_trace, session

LOGGER_NAME = "trace_demo"
logger = logging.getLogger(LOGGER_NAME)


def _configure_logging() -> None:
    """Configure a stdout logger once per process."""

    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="[trace_demo][%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", default=None, help="Trace file (defaults to SCOPETRACE_OUTPUT)")
    parser.add_argument("--threads", type=int, default=4, help="Worker threads")
    parser.add_argument("--iterations", type=int, default=8, help="Work items per thread")
    parser.add_argument("--env-file", default=None, help="Optional .env file with SCOPETRACE_* settings")
    return parser.parse_args()


def build_workload(recorder: Recorder):
    @profile_function(recorder=recorder)
    def crunch(seed: int, size: int = 20_000) -> int:
        total = 0
        for value in range(size):
            total = (total + value * seed) % 1_000_003
        return total

    @profile_function(recorder=recorder)
    def worker(index: int, iterations: int) -> int:
        checksum = 0
        for step in range(iterations):
            with profile_scope(f"worker {index} step {step}", recorder):
                checksum ^= crunch(index * iterations + step)
                time.sleep(0.001)
        return checksum

    return worker


def main() -> None:
    _configure_logging()
    args = parse_args()
    if args.threads <= 0 or args.iterations <= 0:
        raise SystemExit("--threads and --iterations must be positive")
    config = TraceConfig.from_env(dotenv_path=args.env_file)
    recorder = Recorder(config)
    output = pathlib.Path(args.output or config.default_path)
    worker = build_workload(recorder)

    with session("trace_demo", output, recorder):
        with ThreadPoolExecutor(max_workers=args.threads) as pool:
            futures = [pool.submit(worker, idx, args.iterations) for idx in range(args.threads)]
            checksums = [future.result() for future in futures]
    logger.info("Workers finished with checksums %s.", checksums)

    if not config.enabled:
        logger.info("Tracing disabled; no trace written.")
        return
    if not output.exists():
        logger.warning("No trace written to %s; see the recorder errors above.", output)
        return
    records = read_trace(output)
    logger.info("Wrote %d events to %s; open it in chrome://tracing.", len(records), output)


if __name__ == "__main__":
    main()
