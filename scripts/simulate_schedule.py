"""
Print how one card's memory state evolves under a sequence of ratings.

Each rating is applied on the day the previous one scheduled, so the output
reads like a review history.

Usage:
    python -m scripts.simulate_schedule good good easy hard again good
    python -m scripts.simulate_schedule 3 3 4 --ease 2.1 --interval 6 --status review
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone

from flashdeck import sm2


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate SM-2 scheduling for one card")
    parser.add_argument("ratings", nargs="+", help="again/hard/good/easy or 1-4")
    parser.add_argument("--ease", type=float, default=sm2.INITIAL_EASE)
    parser.add_argument("--interval", type=int, default=0)
    parser.add_argument(
        "--status",
        choices=[status.value for status in sm2.CardStatus],
        default=sm2.CardStatus.NEW.value,
    )
    parser.add_argument("--review-count", type=int, default=0)
    parser.add_argument("--start", default="2024-01-01", help="First review date (YYYY-MM-DD)")
    return parser.parse_args()


def main():
    args = parse_args()
    ratings = [sm2.parse_rating(value) for value in args.ratings]

    state = sm2.MemoryState(
        ease=args.ease,
        interval=args.interval,
        status=sm2.CardStatus(args.status),
        review_count=args.review_count,
    )
    now = datetime.fromisoformat(args.start).replace(tzinfo=timezone.utc)

    print(f"{'#':>3}  {'date':<10}  {'rating':<6}  {'status':<9}  {'ease':>5}  {'interval':>8}  next")
    print("-" * 64)
    for i, rating in enumerate(ratings, 1):
        result = sm2.compute_next_state(state, rating, now)
        state = sm2.apply_update(state, sm2.build_review_update(state, result, now))
        print(
            f"{i:>3}  {now.date().isoformat():<10}  {rating.value:<6}  "
            f"{state.status.value:<9}  {state.ease:>5.2f}  {state.interval:>8}  "
            f"{state.next_review.date().isoformat()}"
        )
        now = state.next_review

    print("-" * 64)
    print(f"Final: {state.status.value}, ease {state.ease:.2f}, {state.review_count} review(s)")


if __name__ == "__main__":
    main()
