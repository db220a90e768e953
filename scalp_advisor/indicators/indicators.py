"""Technical indicators for candle enrichment.

Every function takes plain float sequences and returns a list of the same
length. Positions without enough history hold None; None inputs propagate
as None. Internally values are carried as NumPy float64 arrays with NaN
standing in for None.
"""

import logging
from typing import Literal, Sequence

import numpy as np

from scalp_advisor.models.candle import Candle, EnrichedCandle
from scalp_advisor.models.config import IndicatorConfig

logger = logging.getLogger(__name__)

Values = Sequence[float | None]

_RAW_FIELDS = set(Candle.model_fields)


def _to_array(values: Values) -> np.ndarray:
    return np.array(
        [np.nan if v is None else float(v) for v in values], dtype=np.float64
    )


def _to_list(arr: np.ndarray) -> list[float | None]:
    return [None if np.isnan(v) else float(v) for v in arr]


def _absent(n: int) -> list[float | None]:
    return [None] * n


# =============================================================================
# Moving averages
# =============================================================================

def ema(values: Values, period: int) -> list[float | None]:
    """
    Calculate Exponential Moving Average.

    Seeded with the arithmetic mean of the first ``period`` values, then
    ``ema[i] = v[i] * k + ema[i-1] * (1 - k)`` with ``k = 2 / (period + 1)``.

    Args:
        values: Sequence of values
        period: EMA period

    Returns:
        List of EMA values (None for the first period - 1 entries)
    """
    if period <= 0 or len(values) < period:
        return _absent(len(values))

    arr = _to_array(values)
    multiplier = 2.0 / (period + 1)

    result = np.empty_like(arr)
    result[:period - 1] = np.nan
    result[period - 1] = np.mean(arr[:period])

    for i in range(period, len(arr)):
        # NaN seed or input keeps the rest NaN
        result[i] = arr[i] * multiplier + result[i - 1] * (1 - multiplier)

    return _to_list(result)


def sma(values: Values, period: int) -> list[float | None]:
    """
    Calculate Simple Moving Average.

    A window containing an absent value is absent.

    Args:
        values: Sequence of values
        period: SMA period

    Returns:
        List of SMA values
    """
    if period <= 0 or len(values) < period:
        return _absent(len(values))

    arr = _to_array(values)
    result = np.empty_like(arr)
    result[:period - 1] = np.nan

    for i in range(period - 1, len(arr)):
        result[i] = np.mean(arr[i - period + 1 : i + 1])

    return _to_list(result)


def rolling_std(values: Values, period: int, ddof: int = 0) -> list[float | None]:
    """
    Calculate rolling standard deviation.

    Args:
        values: Sequence of values
        period: Window length
        ddof: 0 for population, 1 for sample standard deviation

    Returns:
        List of standard deviations
    """
    if period <= ddof or len(values) < period:
        return _absent(len(values))

    arr = _to_array(values)
    result = np.empty_like(arr)
    result[:period - 1] = np.nan

    for i in range(period - 1, len(arr)):
        result[i] = np.std(arr[i - period + 1 : i + 1], ddof=ddof)

    return _to_list(result)


# =============================================================================
# Windowed extremes
# =============================================================================

def highest(values: Values, period: int) -> list[float | None]:
    """Highest value over the lookback period."""
    if period <= 0 or len(values) < period:
        return _absent(len(values))

    arr = _to_array(values)
    result = np.empty_like(arr)
    result[:period - 1] = np.nan

    for i in range(period - 1, len(arr)):
        result[i] = np.max(arr[i - period + 1 : i + 1])

    return _to_list(result)


def lowest(values: Values, period: int) -> list[float | None]:
    """Lowest value over the lookback period."""
    if period <= 0 or len(values) < period:
        return _absent(len(values))

    arr = _to_array(values)
    result = np.empty_like(arr)
    result[:period - 1] = np.nan

    for i in range(period - 1, len(arr)):
        result[i] = np.min(arr[i - period + 1 : i + 1])

    return _to_list(result)


# =============================================================================
# Volatility
# =============================================================================

def bollinger_bands(
    closes: Values,
    period: int = 20,
    num_std: float = 2.0,
    ddof: int = 0,
) -> tuple[list[float | None], list[float | None], list[float | None]]:
    """
    Calculate Bollinger Bands.

    middle = SMA(close, period)
    upper/lower = middle +/- num_std * std(close, period)

    Args:
        closes: Sequence of close prices
        period: Lookback window
        num_std: Band width in standard deviations
        ddof: Standard deviation convention (0 = population)

    Returns:
        Tuple of (upper, middle, lower) lists
    """
    middle = sma(closes, period)
    std = rolling_std(closes, period, ddof)

    upper: list[float | None] = []
    lower: list[float | None] = []
    for m, s in zip(middle, std):
        if m is None or s is None:
            upper.append(None)
            lower.append(None)
        else:
            upper.append(m + num_std * s)
            lower.append(m - num_std * s)

    return upper, middle, lower


def true_range(
    highs: Values,
    lows: Values,
    closes: Values,
) -> list[float | None]:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    The first candle has no previous close and therefore no true range.
    """
    n = len(highs)
    if n == 0:
        return []

    h = _to_array(highs)
    l = _to_array(lows)
    c = _to_array(closes)

    result = np.full(n, np.nan)
    for i in range(1, n):
        result[i] = max(h[i] - l[i], abs(h[i] - c[i - 1]), abs(l[i] - c[i - 1]))

    return _to_list(result)


def atr(
    highs: Values,
    lows: Values,
    closes: Values,
    period: int = 14,
    method: Literal["sma", "wilder"] = "sma",
) -> list[float | None]:
    """
    Calculate Average True Range (ATR).

    ``sma`` averages the last ``period`` true ranges. ``wilder`` seeds with
    that same average and then applies RMA smoothing
    ``atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period``.
    Either way the first value lands at index ``period``.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices
        period: ATR period
        method: Smoothing method

    Returns:
        List of ATR values
    """
    tr = true_range(highs, lows, closes)
    if method == "sma":
        return sma(tr, period)

    if period <= 0 or len(tr) < period + 1:
        return _absent(len(tr))

    tr_arr = _to_array(tr)
    result = np.full(len(tr_arr), np.nan)
    result[period] = np.mean(tr_arr[1 : period + 1])

    for i in range(period + 1, len(tr_arr)):
        result[i] = (result[i - 1] * (period - 1) + tr_arr[i]) / period

    return _to_list(result)


# =============================================================================
# Momentum
# =============================================================================

def stochastic(
    highs: Values,
    lows: Values,
    closes: Values,
    k_period: int = 14,
    d_period: int = 3,
    flat_value: float | None = 50.0,
    smooth: int = 1,
) -> tuple[list[float | None], list[float | None]]:
    """
    Calculate the Stochastic Oscillator.

    %K = 100 * (close - lowest_low) / (highest_high - lowest_low)
    %D = SMA(%K, d_period)

    When the high-low range is zero, %K is ``flat_value`` (None = absent).
    ``smooth`` > 1 gives the slow variant, %K itself averaged over that many bars.

    Returns:
        Tuple of (%K, %D) lists
    """
    n = len(closes)
    hh = highest(highs, k_period)
    ll = lowest(lows, k_period)

    k_values: list[float | None] = []
    for i in range(n):
        h, l, c = hh[i], ll[i], closes[i]
        if h is None or l is None or c is None:
            k_values.append(None)
        elif h == l:
            k_values.append(flat_value)
        else:
            k_values.append(100.0 * (c - l) / (h - l))

    if smooth > 1:
        k_values = sma(k_values, smooth)

    return k_values, sma(k_values, d_period)


# =============================================================================
# Volume
# =============================================================================

def vwap(
    highs: Values,
    lows: Values,
    closes: Values,
    volumes: Values,
    window: int | None = None,
) -> list[float | None]:
    """
    Calculate Volume Weighted Average Price (VWAP).

    sum(typical_price * volume) / sum(volume), typical = (h + l + c) / 3.

    With ``window=None`` the sums are cumulative from the first supplied
    candle, so the value depends on how much history the caller passes.
    With a window they roll over the last ``window`` candles and are absent
    until that many exist. Zero volume gives None.
    """
    n = len(closes)
    if n == 0:
        return []

    tp = (_to_array(highs) + _to_array(lows) + _to_array(closes)) / 3
    vol = _to_array(volumes)
    pv = tp * vol

    result = np.full(n, np.nan)
    if window is None:
        cum_pv = np.cumsum(pv)
        cum_vol = np.cumsum(vol)
        for i in range(n):
            if cum_vol[i] > 0:
                result[i] = cum_pv[i] / cum_vol[i]
    else:
        for i in range(window - 1, n):
            sum_vol = np.sum(vol[i - window + 1 : i + 1])
            if sum_vol > 0:
                result[i] = np.sum(pv[i - window + 1 : i + 1]) / sum_vol

    return _to_list(result)


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for every indicator carried on an EnrichedCandle."""

    def __init__(self, config: IndicatorConfig | None = None):
        self.config = config or IndicatorConfig()

    def calculate_all(self, candles: Sequence[Candle]) -> dict[str, list[float | None]]:
        """
        Calculate all indicators for the given candles.

        Args:
            candles: Candles in ascending timestamp order

        Returns:
            Dict of indicator name -> values aligned with ``candles``
        """
        cfg = self.config
        highs = [c.high for c in candles]
        lows = [c.low for c in candles]
        closes = [c.close for c in candles]
        volumes = [c.volume for c in candles]

        bb_upper, bb_middle, bb_lower = bollinger_bands(
            closes, cfg.bb_period, cfg.bb_num_std, cfg.bb_ddof
        )
        stoch_k, stoch_d = stochastic(
            highs,
            lows,
            closes,
            cfg.stoch_k_period,
            cfg.stoch_d_period,
            cfg.stoch_flat_value,
        )

        return {
            "ema5": ema(closes, cfg.ema_fast_period),
            "ema10": ema(closes, cfg.ema_mid_period),
            "ema15": ema(closes, cfg.ema_slow_period),
            "bb_upper": bb_upper,
            "bb_middle": bb_middle,
            "bb_lower": bb_lower,
            "stoch_k": stoch_k,
            "stoch_d": stoch_d,
            "vwap": vwap(highs, lows, closes, volumes, cfg.vwap_window),
            "atr14": atr(highs, lows, closes, cfg.atr_period, cfg.atr_method),
            "vma20": sma(volumes, cfg.vma_period),
        }

    def enrich(self, candles: Sequence[Candle]) -> list[EnrichedCandle]:
        """
        Attach indicators to every candle.

        Raw OHLCV fields and timestamps are copied through unchanged.
        """
        if len(candles) < self.config.min_history:
            logger.debug(
                "Enriching %d candles, %d needed for a full indicator set",
                len(candles),
                self.config.min_history,
            )

        indicators = self.calculate_all(candles)
        return [
            EnrichedCandle(
                **candle.model_dump(include=_RAW_FIELDS),
                **{name: values[i] for name, values in indicators.items()},
            )
            for i, candle in enumerate(candles)
        ]

    def calculate_latest(self, candles: Sequence[Candle]) -> EnrichedCandle | None:
        """
        Enrich and return only the latest candle.

        Returns:
            The latest EnrichedCandle, or None when there are no candles
        """
        if not candles:
            return None
        return self.enrich(candles)[-1]


def enrich(
    candles: Sequence[Candle],
    config: IndicatorConfig | None = None,
) -> list[EnrichedCandle]:
    """Enrich candles using a one-off IndicatorCalculator."""
    return IndicatorCalculator(config).enrich(candles)
