"""Parental control master keys, the V1 ticket extension format and monorepo TODO tooling."""

__version__ = "0.3.0"