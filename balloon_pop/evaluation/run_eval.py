"""
Evaluation Harness
==================

Plays headless rounds with scripted tap policies against the fixed seed bank
and reports score statistics and outcome tiers.

Usage:
    python -m balloon_pop.evaluation.run_eval --policy greedy
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import numpy as np

from balloon_pop.round_core.config_loader import GameConfig, load_config
from balloon_pop.round_core.game import RoundEngine
from balloon_pop.round_core.state_snapshot import BalloonView, RoundSnapshot

# A policy sees the snapshot at the start of a tick and returns balloon ids
# in the order it wants to tap them.
Policy = Callable[[RoundSnapshot], List[int]]


def idle_policy(snapshot: RoundSnapshot) -> List[int]:
    """Never tap."""
    return []


def _by_value(snapshot: RoundSnapshot) -> List[BalloonView]:
    # Highest value first; among equals, the balloon closest to leaving
    return sorted(snapshot.balloons, key=lambda b: (-b.base_points, b.y))


def greedy_policy(snapshot: RoundSnapshot) -> List[int]:
    """Tap the most valuable balloons first."""
    return [b.id for b in _by_value(snapshot)]


def sniper_policy(snapshot: RoundSnapshot) -> List[int]:
    """Only bonus and special balloons."""
    return [b.id for b in _by_value(snapshot) if b.kind != "normal"]


POLICIES: Dict[str, Policy] = {
    "idle": idle_policy,
    "greedy": greedy_policy,
    "sniper": sniper_policy,
}


@dataclass
class EvalResult:
    """Result for a single seed."""
    seed: int
    final_score: int
    tier: int
    label: str
    can_continue: bool
    popped: int
    escaped: int
    elapsed_time: float


@dataclass
class EvalSummary:
    """Summary of evaluation across all seeds."""
    mean_score: float
    std_score: float
    min_score: int
    max_score: int
    median_score: float
    pass_rate: float
    tier_counts: Dict[int, int]
    total_time: float
    results: List[EvalResult]


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """
    Load the evaluation seed bank.

    Args:
        path: Path to seed_bank.json. Uses default if None.

    Returns:
        List of seeds.
    """
    if path is None:
        path = os.path.join(os.path.dirname(__file__), "seed_bank.json")

    with open(path, "r") as f:
        data = json.load(f)

    return data["seeds"]


def play_round(
    policy: Policy,
    seed: int,
    config: Optional[GameConfig] = None,
    tap_budget: int = 3,
    tap_interval_ms: float = 300.0
) -> RoundEngine:
    """
    Play one full round with simulated time.

    Tick ``k`` happens at ``k * tick_seconds``; the policy's taps for that
    tick are spaced ``tap_interval_ms`` apart after the previous tick.

    Returns:
        The engine, in the completed phase.
    """
    engine = RoundEngine(config=config, seed=seed)
    engine.start()

    tick_ms = engine.config.clock.tick_seconds * 1000.0
    now_ms = 0.0

    while not engine.is_over:
        snapshot = engine.snapshot()
        targets = policy(snapshot)[:tap_budget]
        for i, balloon_id in enumerate(targets):
            engine.tap(balloon_id, now_ms=now_ms + (i + 1) * tap_interval_ms)
        engine.tick()
        now_ms += tick_ms

    return engine


def evaluate_single_seed(
    policy: Policy,
    seed: int,
    config: Optional[GameConfig] = None,
    tap_budget: int = 3,
    tap_interval_ms: float = 300.0,
    verbose: bool = False
) -> EvalResult:
    """
    Evaluate a policy on a single seed.

    Args:
        policy: Tap policy.
        seed: Random seed.
        config: Game configuration. Uses default if None.
        tap_budget: Maximum taps per tick.
        tap_interval_ms: Spacing between taps within a tick.
        verbose: If True, print progress.

    Returns:
        EvalResult for this seed.
    """
    start_time = time.time()
    engine = play_round(policy, seed, config, tap_budget, tap_interval_ms)
    elapsed = time.time() - start_time

    outcome = engine.outcome
    info = engine.get_info()
    result = EvalResult(
        seed=seed,
        final_score=engine.score,
        tier=outcome.tier,
        label=outcome.label,
        can_continue=outcome.can_continue,
        popped=info["popped"],
        escaped=info["escaped"],
        elapsed_time=elapsed
    )
    engine.close()

    if verbose:
        print(f"  Seed {seed}: score={result.final_score}, "
              f"tier={result.tier} ({result.label}), popped={result.popped}")

    return result


def evaluate_policy(
    policy: Policy,
    seeds: Optional[List[int]] = None,
    config: Optional[GameConfig] = None,
    tap_budget: int = 3,
    tap_interval_ms: float = 300.0,
    verbose: bool = True
) -> EvalSummary:
    """
    Evaluate a policy on all seeds in the seed bank.

    Args:
        policy: Tap policy.
        seeds: List of seeds. Uses seed_bank.json if None.
        config: Game configuration. Uses default if None.
        tap_budget: Maximum taps per tick.
        tap_interval_ms: Spacing between taps within a tick.
        verbose: If True, print progress.

    Returns:
        EvalSummary with aggregate statistics.
    """
    if seeds is None:
        seeds = load_seed_bank()
    if config is None:
        config = load_config()

    if verbose:
        print(f"Evaluating on {len(seeds)} seeds...")

    results: List[EvalResult] = []
    total_start = time.time()

    for seed in seeds:
        results.append(evaluate_single_seed(
            policy,
            seed,
            config=config,
            tap_budget=tap_budget,
            tap_interval_ms=tap_interval_ms,
            verbose=verbose
        ))

    total_time = time.time() - total_start
    scores = [r.final_score for r in results]

    summary = EvalSummary(
        mean_score=float(np.mean(scores)),
        std_score=float(np.std(scores)),
        min_score=int(min(scores)),
        max_score=int(max(scores)),
        median_score=float(np.median(scores)),
        pass_rate=float(np.mean([r.can_continue for r in results])),
        tier_counts=dict(sorted(Counter(r.tier for r in results).items())),
        total_time=total_time,
        results=results
    )

    if verbose:
        print()
        print("=" * 50)
        print("EVALUATION SUMMARY")
        print("=" * 50)
        print(f"Seeds evaluated: {len(seeds)}")
        print(f"Mean score:      {summary.mean_score:.2f}")
        print(f"Std deviation:   {summary.std_score:.2f}")
        print(f"Min score:       {summary.min_score}")
        print(f"Max score:       {summary.max_score}")
        print(f"Median score:    {summary.median_score:.2f}")
        print(f"Pass rate:       {summary.pass_rate:.0%}")
        print(f"Tiers:           {summary.tier_counts}")
        print(f"Total time:      {total_time:.2f}s")
        print("=" * 50)

    return summary


def save_results(
    summary: EvalSummary,
    policy_name: str,
    output_path: str
) -> None:
    """Save evaluation results to JSON."""
    data = {
        "policy": policy_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "mean_score": summary.mean_score,
        "std_score": summary.std_score,
        "min_score": summary.min_score,
        "max_score": summary.max_score,
        "median_score": summary.median_score,
        "pass_rate": summary.pass_rate,
        "tier_counts": {str(k): v for k, v in summary.tier_counts.items()},
        "total_time": summary.total_time,
        "results": [
            {
                "seed": r.seed,
                "final_score": r.final_score,
                "tier": r.tier,
                "label": r.label,
                "can_continue": r.can_continue,
                "popped": r.popped,
                "escaped": r.escaped,
                "elapsed_time": r.elapsed_time
            }
            for r in summary.results
        ]
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a balloon-pop tap policy")
    parser.add_argument(
        "--policy",
        type=str,
        default="greedy",
        choices=sorted(POLICIES),
        help="Built-in tap policy"
    )
    parser.add_argument(
        "--seeds",
        type=str,
        default=None,
        help="Path to seed bank JSON (uses default if not specified)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to game_config.yaml (uses default if not specified)"
    )
    parser.add_argument("--tap-budget", type=int, default=3, help="Max taps per tick")
    parser.add_argument(
        "--tap-interval-ms",
        type=float,
        default=300.0,
        help="Spacing between taps within a tick"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to save results JSON"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity"
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}")
        return 1

    seeds = None
    if args.seeds:
        seeds = load_seed_bank(args.seeds)

    summary = evaluate_policy(
        POLICIES[args.policy],
        seeds=seeds,
        config=config,
        tap_budget=args.tap_budget,
        tap_interval_ms=args.tap_interval_ms,
        verbose=not args.quiet
    )

    if args.output:
        save_results(summary, args.policy, args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
