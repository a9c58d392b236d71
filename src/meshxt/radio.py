"""LoRa radio parameter recommendations for a given packet length.

Advisory only: nothing in the codec depends on these numbers. Airtime follows
the Semtech SX127x formula (explicit header, 8-symbol preamble, low data rate
optimisation from SF11); range uses the suburban Okumura-Hata model with a
UK 868 MHz / 25 mW ERP / 1 % duty cycle default profile.

All scalar helpers accept numpy arrays as well, which :func:`recommend` uses
to score the whole SF x bandwidth x coding-rate grid at once.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .exceptions import ValidationError

SF_MIN = 7
SF_MAX = 12
BANDWIDTHS = (125, 250, 500)
CODING_RATES = (5, 6, 7, 8)

MAX_PAYLOAD = 237

DEFAULT_TX_POWER = 14.0
DEFAULT_ANTENNA_GAIN = 2.0
DEFAULT_DUTY_CYCLE = 0.01
DEFAULT_FREQ_MHZ = 868.0
DEFAULT_WINDOW_SECONDS = 3600.0


@dataclass(frozen=True)
class RangeEstimate:
    range_km: float
    link_budget: float
    sensitivity: float


@dataclass(frozen=True)
class RadioConfig:
    spreading_factor: int
    bandwidth_khz: int
    coding_rate: int
    airtime_ms: float
    range_km: float
    data_rate_bps: int
    duty_cycle_usage: float
    within_duty_limit: bool


def _round_to(values: ArrayLike, decimals: int) -> NDArray[np.float64]:
    # Half-up rounding, matching the published tables rather than numpy's half-even.
    scale = 10.0 ** decimals
    return np.floor(np.asarray(values, dtype=np.float64) * scale + 0.5) / scale


def symbol_time(sf: ArrayLike, bw: ArrayLike) -> NDArray[np.float64]:
    """Return the symbol duration in milliseconds."""

    sf_arr = np.asarray(sf, dtype=np.float64)
    bw_arr = np.asarray(bw, dtype=np.float64)
    return np.power(2.0, sf_arr) / (bw_arr * 1000.0) * 1000.0


def airtime(
    payload_bytes: ArrayLike,
    sf: ArrayLike,
    bw: ArrayLike,
    cr: ArrayLike,
    *,
    explicit_header: bool = True,
    preamble_len: int = 8,
) -> NDArray[np.float64]:
    """Return the time on air in milliseconds.

    ``cr`` is the coding-rate denominator, 5 to 8 for 4/5 to 4/8.
    """

    sf_arr = np.asarray(sf, dtype=np.float64)
    t_sym = symbol_time(sf_arr, bw)
    t_preamble = (preamble_len + 4.25) * t_sym

    de = np.where(sf_arr >= 11, 1.0, 0.0)
    ih = 0.0 if explicit_header else 1.0

    numerator = 8.0 * np.asarray(payload_bytes, dtype=np.float64) - 4.0 * sf_arr + 28 + 16 - 20 * ih
    denominator = 4.0 * (sf_arr - 2.0 * de)
    n_payload = 8 + np.maximum(0.0, np.ceil(numerator / denominator)) * np.asarray(cr, dtype=np.float64)
    return t_preamble + n_payload * t_sym


def data_rate(sf: ArrayLike, bw: ArrayLike, cr: ArrayLike) -> NDArray[np.float64]:
    """Return the raw bit rate in bits per second."""

    sf_arr = np.asarray(sf, dtype=np.float64)
    bw_hz = np.asarray(bw, dtype=np.float64) * 1000.0
    return sf_arr * (4.0 / np.asarray(cr, dtype=np.float64)) * bw_hz / np.power(2.0, sf_arr)


def rx_sensitivity(sf: ArrayLike, bw: ArrayLike) -> NDArray[np.float64]:
    """Approximate SX1276 receiver sensitivity in dBm."""

    base = -123.0
    sf_gain = (np.asarray(sf, dtype=np.float64) - 7.0) * 2.5
    bw_penalty = 10.0 * np.log10(np.asarray(bw, dtype=np.float64) / 125.0)
    return base - sf_gain + bw_penalty


def _range_km(
    sf: ArrayLike,
    bw: ArrayLike,
    tx_power: float,
    antenna_gain: float,
    freq: float,
    tx_height: float,
    rx_height: float,
) -> NDArray[np.float64]:
    sensitivity = rx_sensitivity(sf, bw)
    link_budget = tx_power + antenna_gain - sensitivity

    log_freq = np.log10(freq)
    log_hb = np.log10(tx_height)
    a_hm = (1.1 * log_freq - 0.7) * rx_height - (1.56 * log_freq - 0.8)
    a = 69.55 + 26.16 * log_freq - 13.82 * log_hb - a_hm
    b = 44.9 - 6.55 * log_hb
    suburban = 2.0 * np.log10(freq / 28.0) ** 2 + 5.4

    return np.power(10.0, (link_budget - a + suburban) / b)


def range_estimate(
    sf: int,
    bw: float,
    tx_power: float = DEFAULT_TX_POWER,
    antenna_gain: float = DEFAULT_ANTENNA_GAIN,
    freq: float = DEFAULT_FREQ_MHZ,
    tx_height: float = 5.0,
    rx_height: float = 1.5,
) -> RangeEstimate:
    """Estimate the maximum range for one spreading factor and bandwidth."""

    sensitivity = rx_sensitivity(sf, bw)
    link_budget = tx_power + antenna_gain - sensitivity
    range_km = _range_km(sf, bw, tx_power, antenna_gain, freq, tx_height, rx_height)
    return RangeEstimate(
        range_km=float(_round_to(range_km, 1)),
        link_budget=float(_round_to(link_budget, 1)),
        sensitivity=float(_round_to(sensitivity, 1)),
    )


def _check_payload(payload_bytes: int) -> None:
    if payload_bytes < 0:
        raise ValidationError("Payload size must not be negative")
    if payload_bytes > MAX_PAYLOAD:
        raise ValidationError(f"Payload too large: {payload_bytes} bytes (max {MAX_PAYLOAD})")


class _Grid:
    """Scored candidate configurations, one row per (sf, bw, cr)."""

    def __init__(
        self,
        payload_bytes: int,
        sfs: List[int],
        bws: List[int],
        crs: List[int],
        *,
        tx_power: float,
        antenna_gain: float,
        duty_cycle: float,
        window_seconds: float,
    ) -> None:
        rows = np.array(list(itertools.product(sfs, bws, crs)), dtype=np.int64)
        self.sf, self.bw, self.cr = rows[:, 0], rows[:, 1], rows[:, 2]
        raw_airtime = airtime(payload_bytes, self.sf, self.bw, self.cr)
        usage = (raw_airtime / 1000.0) / window_seconds
        self.airtime_ms = _round_to(raw_airtime, 2)
        self.range_km = _round_to(
            _range_km(self.sf, self.bw, tx_power, antenna_gain, DEFAULT_FREQ_MHZ, 5.0, 1.5), 1
        )
        self.data_rate_bps = _round_to(data_rate(self.sf, self.bw, self.cr), 0)
        self.duty_usage = _round_to(usage, 4)
        self.within = usage <= duty_cycle

    def config(self, i: int) -> RadioConfig:
        return RadioConfig(
            spreading_factor=int(self.sf[i]),
            bandwidth_khz=int(self.bw[i]),
            coding_rate=int(self.cr[i]),
            airtime_ms=float(self.airtime_ms[i]),
            range_km=float(self.range_km[i]),
            data_rate_bps=int(self.data_rate_bps[i]),
            duty_cycle_usage=float(self.duty_usage[i]),
            within_duty_limit=bool(self.within[i]),
        )


def recommend(
    payload_bytes: int,
    *,
    desired_range_km: float = 0.0,
    tx_power: float = DEFAULT_TX_POWER,
    antenna_gain: float = DEFAULT_ANTENNA_GAIN,
    duty_cycle: float = DEFAULT_DUTY_CYCLE,
    window_seconds: float = DEFAULT_WINDOW_SECONDS,
) -> RadioConfig:
    """Recommend LoRa parameters for a packet of *payload_bytes*.

    Only duty-cycle compliant configurations are considered unless none is,
    in which case all of them are, least usage first. With a desired range the
    fastest configuration reaching it wins, or the longest-range one if none
    does; otherwise range is maximised with a small airtime penalty.
    """

    _check_payload(payload_bytes)
    grid = _Grid(
        payload_bytes,
        list(range(SF_MIN, SF_MAX + 1)),
        list(BANDWIDTHS),
        list(CODING_RATES),
        tx_power=tx_power,
        antenna_gain=antenna_gain,
        duty_cycle=duty_cycle,
        window_seconds=window_seconds,
    )

    candidates = np.flatnonzero(grid.within)
    if candidates.size == 0:
        candidates = np.argsort(grid.duty_usage, kind="stable")

    if desired_range_km > 0:
        meets = candidates[grid.range_km[candidates] >= desired_range_km]
        if meets.size:
            choice = int(meets[np.argmin(grid.airtime_ms[meets])])
        else:
            choice = int(candidates[np.argmax(grid.range_km[candidates])])
    else:
        score = grid.range_km[candidates] - grid.airtime_ms[candidates] / 10000.0
        choice = int(candidates[np.argmax(score)])

    return grid.config(choice)


def all_configs(
    payload_bytes: int,
    *,
    tx_power: float = DEFAULT_TX_POWER,
    antenna_gain: float = DEFAULT_ANTENNA_GAIN,
) -> List[RadioConfig]:
    """Return one configuration per spreading factor at 125 kHz and 4/5."""

    _check_payload(payload_bytes)
    grid = _Grid(
        payload_bytes,
        list(range(SF_MIN, SF_MAX + 1)),
        [125],
        [5],
        tx_power=tx_power,
        antenna_gain=antenna_gain,
        duty_cycle=DEFAULT_DUTY_CYCLE,
        window_seconds=DEFAULT_WINDOW_SECONDS,
    )
    return [grid.config(i) for i in range(grid.sf.size)]


__all__ = [
    "BANDWIDTHS",
    "CODING_RATES",
    "MAX_PAYLOAD",
    "RadioConfig",
    "RangeEstimate",
    "SF_MAX",
    "SF_MIN",
    "airtime",
    "all_configs",
    "data_rate",
    "range_estimate",
    "recommend",
    "rx_sensitivity",
    "symbol_time",
]
