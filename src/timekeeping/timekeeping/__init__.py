"""Timekeeping engine: turns biometric punches into payroll-ready work hours."""

from __future__ import annotations
