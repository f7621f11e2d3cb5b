#!/usr/bin/env python3
"""
Evaluation runner for the Huffman codec.

This evaluation script:
- Runs the pytest suite in tests/ and collects per-test outcomes
- Benchmarks compression ratio and speed over generated corpora
- Writes a JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output PATH] [--skip-tests]
"""
import argparse
import json
import os
import platform
import random
import subprocess
import sys
import time
import uuid
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_service import decode, encode  # noqa: E402

OUTCOMES = {
    " PASSED": "passed",
    " FAILED": "failed",
    " ERROR": "error",
    " SKIPPED": "skipped",
}


def generate_run_id():
    return uuid.uuid4().hex[:8]


def get_git_commit():
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return "unknown"
    if result.returncode != 0:
        return "unknown"
    return result.stdout.strip()[:8]


def get_environment_info():
    """Collect environment information for the report."""
    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "architecture": platform.machine(),
        "git_commit": get_git_commit(),
    }


def parse_pytest_verbose_output(output):
    """Turn `pytest -v` lines like `tests/x.py::test_y PASSED` into dicts."""
    tests = []
    for line in output.splitlines():
        line = line.strip()
        if "::" not in line:
            continue
        for marker, outcome in OUTCOMES.items():
            if marker in line:
                nodeid = line.split(marker)[0].strip()
                tests.append(
                    {
                        "nodeid": nodeid,
                        "name": nodeid.split("::")[-1],
                        "outcome": outcome,
                    }
                )
                break
    return tests


def summarize(tests):
    summary = {"total": len(tests)}
    for outcome in OUTCOMES.values():
        summary[outcome] = sum(1 for t in tests if t["outcome"] == outcome)
    return summary


def run_test_suite(timeout=600):
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")

    cmd = [sys.executable, "-m", "pytest", str(PROJECT_ROOT / "tests"), "-v", "--tb=short"]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(PROJECT_ROOT)

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("Test execution timed out")
        return {"success": False, "exit_code": -1, "tests": [], "summary": {"error": "timeout"}}

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize(tests)
    print(
        f"Results: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['error']} errors, {summary['skipped']} skipped (total: {summary['total']})"
    )
    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def benchmark_corpora(size=64 * 1024, seed=0):
    rng = random.Random(seed)
    text = b"INFO request served in 12ms path=/api/v1/items status=200\n"
    return {
        "random": bytes(rng.getrandbits(8) for _ in range(size)),
        "log_text": (text * (size // len(text) + 1))[:size],
        "skewed": bytes(rng.choice(b"aaaaaaaabbbbccd") for _ in range(size)),
        "single_symbol": b"A" * size,
        "all_bytes": bytes(range(256)) * (size // 256),
    }


def run_benchmark(corpora):
    print(f"\n{'=' * 60}")
    print("RUNNING BENCHMARK")
    print(f"{'=' * 60}")

    results = {}
    for name, data in corpora.items():
        t0 = time.perf_counter()
        packed = encode(data)
        t1 = time.perf_counter()
        restored = decode(packed)
        t2 = time.perf_counter()
        results[name] = {
            "input_bytes": len(data),
            "packed_bytes": len(packed),
            "compression_ratio": len(packed) / len(data) if data else 0.0,
            "compression_time": t1 - t0,
            "decompression_time": t2 - t1,
            "roundtrip_ok": restored == data,
        }
        r = results[name]
        print(
            f"  {name:<14} {r['input_bytes']:>8} -> {r['packed_bytes']:>8} "
            f"ratio={r['compression_ratio']:.3f} roundtrip={'ok' if r['roundtrip_ok'] else 'MISMATCH'}"
        )
    return results


def generate_output_path():
    """evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run Huffman codec evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)",
    )
    parser.add_argument("--skip-tests", action="store_true", help="Only run the benchmark")
    parser.add_argument("--size", type=int, default=64 * 1024, help="Bytes per benchmark corpus")
    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()
    print(f"Run ID: {run_id}")

    tests = None if args.skip_tests else run_test_suite()
    benchmark = run_benchmark(benchmark_corpora(args.size))

    success = all(r["roundtrip_ok"] for r in benchmark.values())
    if tests is not None:
        success = success and tests["success"]

    finished_at = datetime.now()
    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round((finished_at - started_at).total_seconds(), 6),
        "success": success,
        "environment": get_environment_info(),
        "tests": tests,
        "benchmark": benchmark,
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\nReport saved to: {output_path}")
    print(f"Success: {'YES' if success else 'NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
