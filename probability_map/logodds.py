# region Imports
import numpy as np
# endregion

# region Probability <-> Log-odds
def probability_to_log_odds(probability):
    """
    ln(p / (1 - p)). Works on scalars and arrays.
    p == 0 or p == 1 gives -inf / +inf; callers must keep p in (0, 1).
    """
    p = np.asarray(probability, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        log_odds = np.log(p / (1.0 - p))
    return float(log_odds) if log_odds.ndim == 0 else log_odds


def log_odds_to_probability(log_odds):
    """e^l / (1 + e^l). Works on scalars and arrays."""
    values = np.asarray(log_odds, dtype=np.float64)
    with np.errstate(over="ignore", invalid="ignore"):
        odds = np.exp(values)
        probability = odds / (1.0 + odds)
    # exp overflows to inf for very large l; inf/inf is nan, the limit is 1
    probability = np.where(np.isinf(odds), 1.0, probability)
    return float(probability) if probability.ndim == 0 else probability
# endregion
