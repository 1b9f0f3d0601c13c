"""Grid-city ride-hailing simulation: accounts, fares, dispatch and trips."""

__version__ = "1.0.0"