"""Replay package — validated, deterministic observation iteration."""

from .observations import ObservationIterator, PriceObservation, select_prices, to_observation_frame
from .validation import validate_observations
from .window import Resolution, filter_window, parse_iso_date, parse_resolution, resample_frame

__all__ = [
    "ObservationIterator",
    "PriceObservation",
    "select_prices",
    "to_observation_frame",
    "validate_observations",
    "Resolution",
    "filter_window",
    "parse_iso_date",
    "parse_resolution",
    "resample_frame",
]
