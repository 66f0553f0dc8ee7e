"""Objective Bayes correction of between-group variance estimates."""

from __future__ import annotations

import math

import numpy as np


class ObjectiveBayesDebiaser:
    """Debiases a variance estimate while keeping it from going negative."""

    ONE_OVER_SQRT_TWO_PI = 0.3989422804
    ONE_OVER_SQRT_TWO = 0.70710678118

    def debias(self, var_between: float, group_noise: float, num_good_groups: float) -> float:
        """Return the o-Bayes estimate of the true between-groups variance.

        With a uniform prior on [0, inf) for the true variance S, and the method of
        moments estimate var_between - group_noise treated as roughly Gaussian around S,
        the result is the posterior mean of S.
        """
        with np.errstate(all="ignore"):
            groups = np.float64(num_good_groups)
            initial_estimate = np.float64(var_between) - np.float64(group_noise)
            initial_se = max(var_between, group_noise) * np.sqrt(np.float64(2.0) / groups)
            ratio = initial_estimate / initial_se

            numerator = np.exp(-ratio * ratio / 2) * self.ONE_OVER_SQRT_TWO_PI
            denominator = 0.5 * math.erfc(float(-ratio * self.ONE_OVER_SQRT_TWO))

            bayes_correction = initial_se * numerator / np.float64(denominator)
            return float(initial_estimate + bayes_correction)