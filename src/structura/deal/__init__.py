# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Structura Deal Models
Public API for the structura.deal subpackage.

One base deal (property economics and exit assumptions) is analyzed under
alternative financing structures: all cash, conventional, bridge-to-refi,
loan assumption and syndication. Results share one shape so structures can
be compared side by side, and any structure's equity cash flows can be run
through a GP/LP promote waterfall.
"""

from .api import (
    analyze_structure,
    calculate_deal_sensitivity,
    calculate_promote,
    calculate_promote_sensitivity,
    compare_structures,
    default_structure_parameters,
)
from .calculator import (
    analyze_all_cash,
    analyze_assumable,
    analyze_bridge_refi,
    analyze_conventional,
    analyze_syndication,
)
from .comparator import COMPARISON_METRICS, StructureComparison
from .distribution_calculator import (
    DistributionCalculator,
    PromoteOutputs,
    WaterfallState,
    YearlyDistribution,
)
from .fees import SponsorFees
from .inputs import DealInputsBase, MarketSignals
from .partnership import WATERFALL_TEMPLATES, PromoteConfig, WaterfallTier
from .projections import (
    YearlyProjection,
    break_even_occupancy,
    build_projections,
    exit_sale_price,
    forward_noi,
    project_operations,
)
from .results import (
    AnalysisFailure,
    AssumableMetrics,
    BridgeRefiMetrics,
    DealAnalysisResult,
    ExitScenario,
    ExitSensitivity,
    SyndicationMetrics,
)
from .structures import (
    AllCashParameters,
    AssumableParameters,
    BridgeRefiParameters,
    ConventionalParameters,
    StructureParameters,
    SyndicationParameters,
    market_rate,
    parse_structure_parameters,
)

__all__ = [
    # Inputs
    "DealInputsBase",
    "MarketSignals",
    # Structure parameters
    "AllCashParameters",
    "AssumableParameters",
    "BridgeRefiParameters",
    "ConventionalParameters",
    "StructureParameters",
    "SyndicationParameters",
    "default_structure_parameters",
    "market_rate",
    "parse_structure_parameters",
    # Analysis API
    "analyze_structure",
    "analyze_all_cash",
    "analyze_assumable",
    "analyze_bridge_refi",
    "analyze_conventional",
    "analyze_syndication",
    "compare_structures",
    "calculate_promote",
    "calculate_promote_sensitivity",
    "calculate_deal_sensitivity",
    # Results
    "AnalysisFailure",
    "AssumableMetrics",
    "BridgeRefiMetrics",
    "DealAnalysisResult",
    "ExitScenario",
    "ExitSensitivity",
    "SyndicationMetrics",
    "StructureComparison",
    "COMPARISON_METRICS",
    # Projections
    "YearlyProjection",
    "break_even_occupancy",
    "build_projections",
    "exit_sale_price",
    "forward_noi",
    "project_operations",
    # Partnership and waterfall
    "WaterfallTier",
    "PromoteConfig",
    "WATERFALL_TEMPLATES",
    "SponsorFees",
    "DistributionCalculator",
    "WaterfallState",
    "YearlyDistribution",
    "PromoteOutputs",
]
