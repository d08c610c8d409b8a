#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import os
import sys
from datetime import date

from telexport import (
    CompletionResult,
    Credentials,
    FetchOrchestrator,
    LamlMessagesSource,
    ProgressSnapshot,
    RunOutcome,
    StorageLimitReport,
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Export messages to CSV in weekly chunks")
    p.add_argument("start", type=date.fromisoformat, help="first day, YYYY-MM-DD")
    p.add_argument("end", type=date.fromisoformat, help="last day, YYYY-MM-DD")
    p.add_argument("-o", "--output", default="messages.csv")
    p.add_argument("--space-url", default=os.environ.get("TELEXPORT_SPACE_URL"))
    p.add_argument("--project-id", default=os.environ.get("TELEXPORT_PROJECT_ID"))
    p.add_argument("--auth-token", default=os.environ.get("TELEXPORT_AUTH_TOKEN"))
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


def write_csv(path: str, records: list) -> None:
    rows = [r.to_row() for r in records]
    if not rows:
        print("No messages in range")
        return
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    print(f"Wrote {len(rows)} messages to {path}")


async def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.start > args.end:
        print("start must not be after end", file=sys.stderr)
        return 2

    if not (args.project_id and args.auth_token and args.space_url):
        print("project id, auth token and space url are required", file=sys.stderr)
        return 2

    creds = Credentials(
        project_id=args.project_id,
        auth_token=args.auth_token,
        space_url=args.space_url,
    )

    async with LamlMessagesSource() as source:
        orchestrator = FetchOrchestrator(source)

        def progress(p: ProgressSnapshot) -> None:
            eta = orchestrator.get_estimated_time_remaining()
            eta_text = f", ~{eta}s left" if eta is not None else ""
            print(
                f"[{orchestrator.format_elapsed_time(p.elapsed_ms)}] "
                f"{p.completed_chunks}/{p.total_chunks} chunks, {p.total_records} messages{eta_text}"
            )

        def complete(result: CompletionResult) -> None:
            for failed in result.failed_chunks:
                print(f"Chunk {failed.index} failed: {failed.error}", file=sys.stderr)
            write_csv(args.output, result.records)

        def storage_limited(report: StorageLimitReport) -> None:
            print(f"Storage limit reached, skipped {len(report.skipped_chunks)} chunks")
            write_csv(args.output, report.records)

        orchestrator.on_progress(progress)
        orchestrator.on_complete(complete)
        orchestrator.on_storage_limit(storage_limited)
        orchestrator.on_error(lambda f: print(f"Run failed: {f.error}", file=sys.stderr))

        outcome = await orchestrator.start_fetch(creds, args.start, args.end)
    return 0 if outcome is not RunOutcome.ERRORED else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
