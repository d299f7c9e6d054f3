"""
Evaluation Package
==================

Contains the seed bank, built-in tap policies and the headless evaluation
harness.
"""

from balloon_pop.evaluation.run_eval import evaluate_policy, load_seed_bank, POLICIES

__all__ = ["evaluate_policy", "load_seed_bank", "POLICIES"]
