#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the service cost allocator.

Key idea: weights, not hours
----------------------------
The allocator never prices a client from a rate card. It adds up how much
infrastructure a client has (equipment weight + service weight), scales that
by the client's tariff/SLA multipliers and then splits the company's total
monthly cost in proportion to the result.

Every knob that influences that split lives here so the CLI, the snapshot
loader and the allocation policies agree on the same defaults.
"""

import os  # Standard library: access environment variables (os.getenv).

# ---------------------------------------------------------------------
# Financial defaults
# ---------------------------------------------------------------------
# DEFAULT_PROFIT_MARGIN:
# - Percentage added on top of each client's cost share.
# - Used when the company has no financial settings or the margin is missing.
# - 20 -> finalPrice = baseCost * 1.2
DEFAULT_PROFIT_MARGIN = float(os.getenv("COSTALLOC_PROFIT_MARGIN", "20"))

# DEFAULT_EXPECTED_REVENUE:
# - Monthly revenue target stored with the financial settings.
# - Only used for the revenue gap shown in the summary.
DEFAULT_EXPECTED_REVENUE = 0.0

# DEFAULT_EXPENSE_RATE:
# - Factor applied to the monthly expense total before it is added to salaries.
# - Expenses are often booked in a different currency than salaries
#   (e.g. USD licences vs UAH payroll); 1.0 means "same currency".
DEFAULT_EXPENSE_RATE = float(os.getenv("COSTALLOC_EXPENSE_RATE", "1.0"))

# DEFAULT_CURRENCY:
# - Only used for presentation (reports / console tables).
DEFAULT_CURRENCY = os.getenv("COSTALLOC_CURRENCY", "UAH")

# ---------------------------------------------------------------------
# Client multipliers
# ---------------------------------------------------------------------
# Applied when a client assignment does not carry its own value.
DEFAULT_TARIFF_MULTIPLIER = 1.0
DEFAULT_SLA_MULTIPLIER = 1.0

# ---------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------
# DEFAULT_SERVICE_WEIGHT:
# - Catalog services without a weight (or with weight 0) count as 1.
DEFAULT_SERVICE_WEIGHT = 1.0

# DEFAULT_EQUIPMENT_WEIGHT:
# - Weight used for legacy equipment entries stored as a bare count.
DEFAULT_EQUIPMENT_WEIGHT = 1.0

# STAFFING_SHORTAGE_PENALTY:
# - Multiplier applied to a service's weight when nobody on staff supports it
#   (neither by name nor by specialization).
# - Uncovered services are modelled as more expensive to run.
STAFFING_SHORTAGE_PENALTY = float(os.getenv("COSTALLOC_SHORTAGE_PENALTY", "1.5"))

# ---------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------
# UNKNOWN_SERVICE_POLICIES:
# - What to do when a client binding references a service that is not in the
#   company catalog.
#   - "skip" : ignore the binding silently
#   - "warn" : ignore the binding but log a warning
#   - "error": raise UnknownServiceReferenceError
UNKNOWN_SERVICE_POLICIES = ("skip", "warn", "error")
DEFAULT_UNKNOWN_SERVICE_POLICY = os.getenv("COSTALLOC_UNKNOWN_SERVICE_POLICY", "skip").strip().lower()

# DEFAULT_POLICY:
# - Name of the allocation policy used by the CLI when --policy is missing.
# - Built-ins: "advanced" and "simplified"; more can be declared in YAML.
DEFAULT_POLICY = os.getenv("COSTALLOC_DEFAULT_POLICY", "advanced")

# POLICY_DIR:
# - Directory with declarative policy definitions (*.yaml / *.yml / *.json).
# - Empty -> the definitions shipped inside the package.
POLICY_DIR = os.getenv("COSTALLOC_POLICY_DIR", "").strip()

# ---------------------------------------------------------------------
# Accepted vocabulary
# ---------------------------------------------------------------------
SERVICE_TYPES = ("SaaS", "IaaS", "PaaS")
SERVICE_QUALITIES = ("High", "Medium", "Low")
PERIOD_TYPES = ("months", "years")

# ---------------------------------------------------------------------
# Runs / logging
# ---------------------------------------------------------------------
# RUNS_DIR:
# - Root folder where the CLI writes one sub-folder per run (pricing.json,
#   report.md, metadata.json, console.log, trace.jsonl).
RUNS_DIR = os.getenv("COSTALLOC_RUNS_DIR", "runs")

DEFAULT_LOG_LEVEL = os.getenv("COSTALLOC_LOG_LEVEL", "INFO")
